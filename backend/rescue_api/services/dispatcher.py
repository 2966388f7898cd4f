"""
Animal Rescue API — Request Dispatcher
=======================================

What:  Routes an ApiRequest to the right repository operation by method and
       path identifier, and returns the rendered ApiResponse.
How:   Identifier parsing and body decoding happen here, before the
       repository is touched. Every branch yields a `Success` or raises a
       RescueError; `dispatch` funnels both through `build_response`.

Routing table:
    GET     + id   → get_by_id
    GET     no id  → list_all
    POST           → create from body (any id is ignored)
    PATCH   + id   → replace from body (full replace, not merge-patch)
    PATCH   no id  → 400 "ID not provided"
    DELETE  + id   → delete_by_id
    DELETE  no id  → 400 "ID not provided"
    anything else  → 405 "Method not allowed"

A present identifier that is not an integer is answered with 400 "Invalid ID"
and no repository call.
"""

import logging
import re
from typing import Optional

from rescue_api.exceptions import (
    MethodNotSupportedError,
    MissingIdentifierError,
    RescueError,
    ValidationError,
)
from rescue_api.schemas.envelope import ApiRequest, ApiResponse
from rescue_api.services.animal_repository import AnimalRepository
from rescue_api.services.codec import decode_animal
from rescue_api.services.responses import Outcome, Success, build_response

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def parse_identifier(raw: str) -> int:
    """
    Parse a path identifier as a signed 64-bit decimal integer.

    Accepts an optional sign and ASCII digits only: no whitespace, no
    underscores, no empty string.

    Raises:
        ValidationError: "Invalid ID"
    """
    if _INTEGER.fullmatch(raw):
        value = int(raw)
        if _INT64_MIN <= value <= _INT64_MAX:
            return value
    logger.warning("Invalid ID: %r", raw)
    raise ValidationError(message="Invalid ID", field="id", context={"value": raw})


class RequestDispatcher:
    """
    Stateless router in front of an AnimalRepository.

    One instance serves every request; the repository (and the Database
    under it) is the only shared state.
    """

    def __init__(self, repository: AnimalRepository):
        self.repository = repository

    async def dispatch(self, request: ApiRequest) -> ApiResponse:
        try:
            outcome: Outcome = await self._route(request)
        except RescueError as e:
            outcome = e
        return build_response(outcome)

    async def _route(self, request: ApiRequest) -> Success:
        method = request.method
        identifier = request.identifier

        if method == "GET":
            if identifier is None:
                return Success(200, await self.repository.list_all())
            animal_id = parse_identifier(identifier)
            return Success(200, await self.repository.get_by_id(animal_id))

        if method == "POST":
            animal = decode_animal(request.body)
            return Success(201, await self.repository.create(animal))

        if method == "PATCH":
            animal_id = self._require_identifier(method, identifier)
            animal = decode_animal(request.body)
            return Success(200, await self.repository.replace(animal_id, animal))

        if method == "DELETE":
            animal_id = self._require_identifier(method, identifier)
            await self.repository.delete_by_id(animal_id)
            return Success(204)

        logger.warning("Method not allowed: %s", method)
        raise MethodNotSupportedError(method)

    def _require_identifier(self, method: str, identifier: Optional[str]) -> int:
        if identifier is None:
            logger.warning("ID not provided for %s request", method)
            raise MissingIdentifierError(method)
        return parse_identifier(identifier)
