"""
Repository store: the authoritative in-memory collection of Repository records.

Records are kept in an insertion-ordered dict keyed by id, so lookups are O(1)
and listing returns records in creation order minus deletions. Every operation
holds a single lock across its read/scan/mutate step. The async route handlers run
on the event loop, but the store stays consistent when shared across threads.
"""

import logging
import threading
import uuid
from typing import Any

from catalog.core.errors import INVALID_REPOSITORY_ID, InvalidIdError
from catalog.core.observability import metrics, store_metrics
from catalog.domain.models import Repository, copy_techs

logger = logging.getLogger(__name__)

# The like route answers without the trailing period
INVALID_REPOSITORY_ID_LIKE = "Invalid repository ID"


class RepositoryStore:
    """Process-wide store serving the list, create, update, delete and like operations."""

    def __init__(self) -> None:
        self._records: dict[str, Repository] = {}
        self._lock = threading.Lock()

    def _get_or_raise(self, repository_id: str, message: str) -> Repository:
        record = self._records.get(repository_id)
        if record is None:
            logger.warning(f"Repository not found: {repository_id}")
            raise InvalidIdError(message, details={"id": repository_id})
        return record

    def _publish_size(self) -> None:
        metrics.repositories_stored.set(len(self._records))

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def list_repositories(self) -> list[Repository]:
        """
        Retrieve all repositories.

        Returns:
            Detached copies of every record, in insertion order
        """
        with store_metrics.track("list"), self._lock:
            records = [record.snapshot() for record in self._records.values()]

        logger.debug(f"Retrieved {len(records)} repositories")
        return records

    def create_repository(
        self,
        title: Any,
        url: Any,
        techs: Any,
    ) -> Repository:
        """
        Create a repository with a fresh UUID4 id and zero likes.

        Inputs are stored as given, whatever their type; absent values stay None.

        Returns:
            The created record
        """
        record = Repository(
            id=str(uuid.uuid4()),
            title=title,
            url=url,
            techs=copy_techs(techs),
            likes=0,
        )

        with store_metrics.track("create"), self._lock:
            self._records[record.id] = record
            self._publish_size()
            created = record.snapshot()

        logger.debug(f"Created repository: {created.id}")
        return created

    def update_repository(
        self,
        repository_id: str,
        title: Any,
        url: Any,
        techs: Any,
    ) -> Repository:
        """
        Replace title, url and techs of an existing repository.

        The id, likes and position in the collection are preserved.

        Raises:
            InvalidIdError: If no repository has this id
        """
        with store_metrics.track("update"), self._lock:
            record = self._get_or_raise(repository_id, INVALID_REPOSITORY_ID)
            record.title = title
            record.url = url
            record.techs = copy_techs(techs)
            updated = record.snapshot()

        logger.debug(f"Updated repository: {repository_id}")
        return updated

    def delete_repository(self, repository_id: str) -> None:
        """
        Remove a repository. The order of the remaining records is unchanged.

        Raises:
            InvalidIdError: If no repository has this id
        """
        with store_metrics.track("delete"), self._lock:
            self._get_or_raise(repository_id, INVALID_REPOSITORY_ID)
            del self._records[repository_id]
            self._publish_size()

        logger.debug(f"Deleted repository: {repository_id}")

    def like_repository(self, repository_id: str) -> Repository:
        """
        Increment a repository's likes by exactly one.

        Raises:
            InvalidIdError: If no repository has this id
        """
        with store_metrics.track("like"), self._lock:
            record = self._get_or_raise(repository_id, INVALID_REPOSITORY_ID_LIKE)
            record.likes += 1
            liked = record.snapshot()

        metrics.repository_likes_total.inc()
        logger.debug(f"Liked repository: {repository_id} (likes={liked.likes})")
        return liked

    def clear(self) -> None:
        """Drop every record."""
        with self._lock:
            self._records.clear()
            self._publish_size()
