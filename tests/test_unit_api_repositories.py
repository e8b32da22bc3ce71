"""
Unit tests for the /repositories HTTP routes.

Tests cover:
- List/create/update/delete/like success paths and status codes
- Error bodies for unknown and malformed ids
- Malformed ids rejected before the store is consulted
- Lenient request bodies (omitted fields or body, ignored id/likes, values of any type)
- Malformed ids rejected before routing, whatever the method or sub-path
"""

import uuid
from unittest.mock import patch

import pytest

MALFORMED_ID = "not-a-uuid"


class TestListRepositories:
    @pytest.mark.anyio
    async def test_empty_list(self, client):
        response = client.get("/repositories")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.anyio
    async def test_lists_in_creation_order(self, client, create_repository):
        first = create_repository(title="A")
        second = create_repository(title="B")

        response = client.get("/repositories")

        assert response.status_code == 200
        assert response.json() == [first, second]


class TestCreateRepository:
    @pytest.mark.anyio
    async def test_returns_201_with_record(self, client, repository_payload):
        response = client.post("/repositories", json=repository_payload)

        assert response.status_code == 201
        data = response.json()
        assert uuid.UUID(data["id"]).version == 4
        assert data == {"id": data["id"], **repository_payload, "likes": 0}

    @pytest.mark.anyio
    async def test_ids_are_fresh(self, client, create_repository):
        ids = {create_repository()["id"] for _ in range(10)}
        assert len(ids) == 10

    @pytest.mark.anyio
    async def test_client_cannot_set_id_or_likes(self, client, repository_payload):
        supplied_id = str(uuid.uuid4())
        response = client.post(
            "/repositories", json={**repository_payload, "id": supplied_id, "likes": 10}
        )

        assert response.status_code == 201
        assert response.json()["id"] != supplied_id
        assert response.json()["likes"] == 0

    @pytest.mark.anyio
    async def test_omitted_fields_are_null(self, client):
        response = client.post("/repositories", json={"title": "Only title"})

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Only title"
        assert data["url"] is None
        assert data["techs"] is None
        assert data["likes"] == 0

    @pytest.mark.anyio
    async def test_omitted_body_creates_empty_record(self, client):
        response = client.post("/repositories")

        assert response.status_code == 201
        data = response.json()
        assert (data["title"], data["url"], data["techs"], data["likes"]) == (None, None, None, 0)

    @pytest.mark.anyio
    async def test_field_values_of_any_type_are_stored_as_sent(self, client):
        body = {"title": 123, "url": "u", "techs": "x"}

        response = client.post("/repositories", json=body)

        assert response.status_code == 201
        data = response.json()
        assert (data["title"], data["url"], data["techs"]) == (123, "u", "x")
        assert client.get("/repositories").json() == [data]

    @pytest.mark.anyio
    async def test_nested_values_are_echoed_back(self, client):
        body = {"title": {"en": "X"}, "url": None, "techs": [1, {"name": "a"}]}

        response = client.post("/repositories", json=body)

        assert response.status_code == 201
        assert response.json()["title"] == {"en": "X"}
        assert response.json()["techs"] == [1, {"name": "a"}]

    @pytest.mark.anyio
    async def test_unparseable_json_body_returns_400(self, client):
        response = client.post(
            "/repositories",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}
        assert client.get("/repositories").json() == []


class TestUpdateRepository:
    @pytest.mark.anyio
    async def test_non_list_techs_replace_existing_list(self, client, create_repository):
        repo = create_repository(techs=["a"])

        response = client.put(f"/repositories/{repo['id']}", json={"techs": "b", "url": 7})

        assert response.status_code == 200
        assert (response.json()["techs"], response.json()["url"]) == ("b", 7)

    @pytest.mark.anyio
    async def test_replaces_fields_and_preserves_id_and_likes(self, client, create_repository):
        repo = create_repository(title="A")
        client.post(f"/repositories/{repo['id']}/like")
        client.post(f"/repositories/{repo['id']}/like")

        response = client.put(
            f"/repositories/{repo['id']}",
            json={"title": "Z", "url": "http://z", "techs": ["z"], "likes": 50},
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": repo["id"],
            "title": "Z",
            "url": "http://z",
            "techs": ["z"],
            "likes": 2,
        }

    @pytest.mark.anyio
    async def test_keeps_position_in_list(self, client, create_repository):
        first = create_repository(title="A")
        second = create_repository(title="B")

        client.put(f"/repositories/{first['id']}", json={"title": "A2"})

        titles = [r["title"] for r in client.get("/repositories").json()]
        ids = [r["id"] for r in client.get("/repositories").json()]
        assert ids == [first["id"], second["id"]]
        assert titles == ["A2", "B"]

    @pytest.mark.anyio
    async def test_unknown_id_returns_400_and_store_unchanged(self, client, create_repository):
        create_repository(title="A")
        before = client.get("/repositories").json()

        response = client.put(f"/repositories/{uuid.uuid4()}", json={"title": "Z"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid repository ID."}
        assert client.get("/repositories").json() == before

    @pytest.mark.anyio
    async def test_malformed_id_returns_400(self, client):
        response = client.put(f"/repositories/{MALFORMED_ID}", json={"title": "Z"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid repository ID."}


class TestDeleteRepository:
    @pytest.mark.anyio
    async def test_returns_204_with_empty_body(self, client, create_repository):
        repo = create_repository()

        response = client.delete(f"/repositories/{repo['id']}")

        assert response.status_code == 204
        assert response.content == b""

    @pytest.mark.anyio
    async def test_removes_exactly_one_record(self, client, create_repository):
        a = create_repository(title="A")
        b = create_repository(title="B")
        c = create_repository(title="C")

        client.delete(f"/repositories/{b['id']}")

        assert client.get("/repositories").json() == [a, c]

    @pytest.mark.anyio
    async def test_unknown_id_returns_400(self, client, create_repository):
        create_repository()

        response = client.delete(f"/repositories/{uuid.uuid4()}")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid repository ID."}
        assert len(client.get("/repositories").json()) == 1

    @pytest.mark.anyio
    async def test_malformed_id_returns_400(self, client):
        response = client.delete(f"/repositories/{MALFORMED_ID}")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid repository ID."}


class TestLikeRepository:
    @pytest.mark.anyio
    async def test_increments_likes(self, client, create_repository):
        repo = create_repository()

        response = client.post(f"/repositories/{repo['id']}/like")

        assert response.status_code == 200
        assert response.json() == {**repo, "likes": 1}

    @pytest.mark.anyio
    async def test_k_likes_add_k_and_leave_others_alone(self, client, create_repository):
        target = create_repository(title="A")
        other = create_repository(title="B")

        for _ in range(7):
            response = client.post(f"/repositories/{target['id']}/like")

        assert response.json()["likes"] == 7
        assert client.get("/repositories").json() == [{**target, "likes": 7}, other]

    @pytest.mark.anyio
    async def test_unknown_id_returns_400(self, client):
        response = client.post(f"/repositories/{uuid.uuid4()}/like")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid repository ID"}

    @pytest.mark.anyio
    async def test_malformed_id_returns_400(self, client):
        response = client.post(f"/repositories/{MALFORMED_ID}/like")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid repository ID."}


class TestMalformedIdShortCircuits:
    """A malformed id is rejected without any store lookup, whatever the store holds."""

    @pytest.mark.parametrize(
        ("method", "path", "store_method"),
        [
            ("put", f"/repositories/{MALFORMED_ID}", "update_repository"),
            ("delete", f"/repositories/{MALFORMED_ID}", "delete_repository"),
            ("post", f"/repositories/{MALFORMED_ID}/like", "like_repository"),
        ],
    )
    @pytest.mark.parametrize("records", [0, 3])
    @pytest.mark.anyio
    async def test_store_not_called(
        self, client, store, create_repository, method, path, store_method, records
    ):
        for _ in range(records):
            create_repository()

        with patch.object(store, store_method) as mocked:
            response = client.request(method.upper(), path, json={"title": "Z"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid repository ID."}
        mocked.assert_not_called()
        assert store.count() == records

    @pytest.mark.anyio
    async def test_unmatched_path_under_id_is_not_found(self, client):
        response = client.get(f"/repositories/{uuid.uuid4()}/unknown")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get", f"/repositories/{MALFORMED_ID}"),
            ("patch", f"/repositories/{MALFORMED_ID}"),
            ("get", f"/repositories/{MALFORMED_ID}/like"),
            ("post", f"/repositories/{MALFORMED_ID}/unknown"),
            ("delete", f"/repositories/{MALFORMED_ID}/a/b"),
        ],
    )
    @pytest.mark.anyio
    async def test_malformed_id_without_matching_route_returns_400(self, client, method, path):
        response = client.request(method.upper(), path)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid repository ID."}

    @pytest.mark.anyio
    async def test_valid_id_without_matching_method_is_not_allowed(self, client):
        response = client.get(f"/repositories/{uuid.uuid4()}")

        assert response.status_code == 405
        assert response.json() == {"error": "Method Not Allowed"}
