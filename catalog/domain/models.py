"""Domain entities for the repository catalog."""

from dataclasses import dataclass, replace
from typing import Any


def copy_techs(techs: Any) -> Any:
    """Copy a techs list so the store never shares it with callers; other values pass through."""
    return list(techs) if isinstance(techs, list) else techs


@dataclass
class Repository:
    """
    A tracked external project reference.

    `title`, `url` and `techs` are stored exactly as the client sent them, of
    whatever JSON type, and are None when a field was omitted. `likes` only
    changes through the like operation.
    """

    id: str
    title: Any = None
    url: Any = None
    techs: Any = None
    likes: int = 0

    def snapshot(self) -> "Repository":
        """Return a detached copy safe to hand out of the store."""
        return replace(self, techs=copy_techs(self.techs))
