"""
Animal Rescue API — Request Dispatcher Tests
=============================================

What:  Routing table, identifier parsing and status mapping.
How:   Most tests use a mocked AnimalRepository so call counts can be
       asserted; the lifecycle tests run against the SQLite-backed dispatcher.

What we test:
    ✅ Every row of the routing table
    ✅ Non-numeric id → 400 "Invalid ID" with zero repository calls
    ✅ PATCH / DELETE without id → 400 "ID not provided"
    ✅ Unsupported verbs → 405 "Method not allowed"
    ✅ Malformed body → 400 "Invalid request body" with zero repository calls
    ✅ PersistenceError → 500 with a generic body
    ✅ End-to-end create / replace / delete lifecycle
"""

import json

import pytest

from rescue_api.exceptions import PersistenceError, ValidationError
from rescue_api.schemas.animal import Animal
from rescue_api.schemas.envelope import ApiRequest
from rescue_api.services.dispatcher import RequestDispatcher, parse_identifier

FIDO = Animal(id=1, name="Fido", species="Dog", arrival_date="2024-01-01", status="available")


def request(method, animal_id=None, body=None) -> ApiRequest:
    path_parameters = {"id": animal_id} if animal_id is not None else None
    return ApiRequest(method=method, path_parameters=path_parameters, body=body)


def assert_no_repository_calls(repo):
    for name in ("list_all", "create", "get_by_id", "replace", "delete_by_id"):
        getattr(repo, name).assert_not_awaited()


class TestParseIdentifier:

    @pytest.mark.parametrize(
        "raw, expected",
        [("1", 1), ("42", 42), ("007", 7), ("+5", 5), ("-3", -3), ("9223372036854775807", 2 ** 63 - 1)],
    )
    def test_valid(self, raw, expected):
        assert parse_identifier(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", "abc", "1.5", "1e3", " 1", "1 ", "1_000", "0x1F", "--1", "٣", "9223372036854775808"],
    )
    def test_invalid(self, raw):
        with pytest.raises(ValidationError, match="Invalid ID"):
            parse_identifier(raw)


class TestRouting:
    """Routing table with a mocked repository."""

    @pytest.fixture(autouse=True)
    def _dispatcher(self, mock_repository):
        self.repo = mock_repository
        self.dispatcher = RequestDispatcher(mock_repository)

    @pytest.mark.asyncio
    async def test_get_without_id_lists(self):
        self.repo.list_all.return_value = [FIDO]

        response = await self.dispatcher.dispatch(request("GET"))

        assert response.status_code == 200
        assert response.headers["Content-Type"] == "application/json"
        assert json.loads(response.body)[0]["name"] == "Fido"
        self.repo.list_all.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_without_id_empty_list(self):
        self.repo.list_all.return_value = []

        response = await self.dispatcher.dispatch(request("GET"))

        assert response.status_code == 200
        assert response.body == "[]"

    @pytest.mark.asyncio
    async def test_get_with_id(self):
        self.repo.get_by_id.return_value = FIDO

        response = await self.dispatcher.dispatch(request("GET", "1"))

        assert response.status_code == 200
        assert json.loads(response.body)["id"] == 1
        self.repo.get_by_id.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_post_creates(self):
        self.repo.create.return_value = FIDO
        body = json.dumps({"name": "Fido", "species": "Dog", "arrivalDate": "2024-01-01", "status": "available"})

        response = await self.dispatcher.dispatch(request("POST", body=body))

        assert response.status_code == 201
        assert json.loads(response.body)["id"] == 1
        sent = self.repo.create.await_args.args[0]
        assert isinstance(sent, Animal)
        assert sent.name == "Fido"

    @pytest.mark.asyncio
    async def test_post_ignores_path_identifier(self):
        self.repo.create.return_value = FIDO

        response = await self.dispatcher.dispatch(request("POST", "not-a-number", body='{"name": "Fido"}'))

        assert response.status_code == 201
        self.repo.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_patch_replaces(self):
        self.repo.replace.return_value = FIDO

        response = await self.dispatcher.dispatch(request("PATCH", "1", body='{"name": "Fido"}'))

        assert response.status_code == 200
        animal_id, animal = self.repo.replace.await_args.args
        assert animal_id == 1
        assert animal.name == "Fido"

    @pytest.mark.asyncio
    async def test_delete(self):
        self.repo.delete_by_id.return_value = None

        response = await self.dispatcher.dispatch(request("DELETE", "1"))

        assert response.status_code == 204
        assert response.body == ""
        self.repo.delete_by_id.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PATCH", "DELETE"])
    @pytest.mark.parametrize("raw_id", ["abc", "1.5", ""])
    async def test_invalid_id_makes_no_repository_call(self, method, raw_id):
        response = await self.dispatcher.dispatch(request(method, raw_id, body='{"name": "Fido"}'))

        assert response.status_code == 400
        assert response.body == "Invalid ID"
        assert_no_repository_calls(self.repo)

    @pytest.mark.asyncio
    async def test_patch_invalid_id_checked_before_body(self):
        response = await self.dispatcher.dispatch(request("PATCH", "abc", body="{broken"))

        assert response.status_code == 400
        assert response.body == "Invalid ID"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["PATCH", "DELETE"])
    async def test_missing_id(self, method):
        response = await self.dispatcher.dispatch(request(method, body='{"name": "Fido"}'))

        assert response.status_code == 400
        assert response.body == "ID not provided"
        assert_no_repository_calls(self.repo)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["PUT", "HEAD", "OPTIONS", "TRACE", "get", "FOO"])
    async def test_unsupported_method(self, method):
        response = await self.dispatcher.dispatch(request(method, "1"))

        assert response.status_code == 405
        assert response.body == "Method not allowed"
        assert_no_repository_calls(self.repo)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, animal_id",
        [("POST", None), ("PATCH", "1")],
    )
    @pytest.mark.parametrize("body", ["{not json", "[1, 2]", '{"age": "old"}', None])
    async def test_malformed_body_makes_no_repository_call(self, method, animal_id, body):
        response = await self.dispatcher.dispatch(request(method, animal_id, body=body))

        assert response.status_code == 400
        assert response.body == "Invalid request body"
        assert_no_repository_calls(self.repo)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, animal_id, body, operation, message",
        [
            ("GET", None, None, "list_all", "Failed to fetch animals"),
            ("GET", "1", None, "get_by_id", "Failed to fetch animal by ID"),
            ("POST", None, '{"name": "Fido"}', "create", "Failed to create animal"),
            ("PATCH", "1", '{"name": "Fido"}', "replace", "Failed to update animal"),
            ("DELETE", "1", None, "delete_by_id", "Failed to delete animal"),
        ],
    )
    async def test_persistence_error_is_500(self, method, animal_id, body, operation, message):
        getattr(self.repo, operation).side_effect = PersistenceError(
            message=message,
            operation=operation,
            context={"error": "relation \"animals\" does not exist"},
        )

        response = await self.dispatcher.dispatch(request(method, animal_id, body=body))

        assert response.status_code == 500
        assert response.body == message
        assert "relation" not in response.body


class TestLifecycle:
    """Full request flows against the SQLite-backed dispatcher."""

    @pytest.mark.asyncio
    async def test_create_get_replace_delete(self, dispatcher, full_payload):
        created = await dispatcher.dispatch(request("POST", body=json.dumps(full_payload)))
        assert created.status_code == 201
        animal_id = json.loads(created.body)["id"]
        assert animal_id > 0

        fetched = await dispatcher.dispatch(request("GET", str(animal_id)))
        assert json.loads(fetched.body) == {**full_payload, "id": animal_id}

        replacement = {"name": "Luna", "species": "Cat", "arrivalDate": "2024-02-14", "status": "adopted"}
        replaced = await dispatcher.dispatch(request("PATCH", str(animal_id), body=json.dumps(replacement)))
        assert replaced.status_code == 200
        assert json.loads(replaced.body) == {**replacement, "id": animal_id}

        refetched = await dispatcher.dispatch(request("GET", str(animal_id)))
        assert json.loads(refetched.body) == {**replacement, "id": animal_id}

        deleted = await dispatcher.dispatch(request("DELETE", str(animal_id)))
        assert deleted.status_code == 204

        gone = await dispatcher.dispatch(request("GET", str(animal_id)))
        assert gone.status_code == 500
        assert gone.body == "Failed to fetch animal by ID"

    @pytest.mark.asyncio
    async def test_list_after_creates_and_delete(self, dispatcher, fido_payload):
        ids = []
        for i in range(3):
            response = await dispatcher.dispatch(
                request("POST", body=json.dumps({**fido_payload, "name": f"Fido {i}"}))
            )
            ids.append(json.loads(response.body)["id"])

        listed = json.loads((await dispatcher.dispatch(request("GET"))).body)
        assert sorted(a["id"] for a in listed) == sorted(ids)

        await dispatcher.dispatch(request("DELETE", str(ids[1])))
        listed = json.loads((await dispatcher.dispatch(request("GET"))).body)
        assert len(listed) == 2
