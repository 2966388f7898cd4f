"""
Animal Rescue API — Response Builder
=====================================

What:  Renders an operation outcome into an ApiResponse.
How:   An outcome is either a `Success` (status code + optional payload) or
       one of the RescueError kinds. `build_response` is the only place that
       picks status codes, bodies and headers.

Status mapping:
    Success(200, animal | [animals])  → 200 JSON
    Success(201, animal)              → 201 JSON (id included)
    Success(204)                      → 204, empty body
    ValidationError                   → 400 "Invalid ID" / "Invalid request body"
    MissingIdentifierError            → 400 "ID not provided"
    MethodNotSupportedError           → 405 "Method not allowed"
    PersistenceError / EncodingError  → 500, generic message
"""

from dataclasses import dataclass
from typing import Optional, Union

from rescue_api.exceptions import EncodingError, RescueError
from rescue_api.schemas.envelope import ApiResponse
from rescue_api.services.codec import Payload, encode

JSON_HEADERS = {"Content-Type": "application/json"}
TEXT_HEADERS = {"Content-Type": "text/plain; charset=utf-8"}


@dataclass(frozen=True)
class Success:
    status_code: int
    payload: Optional[Payload] = None


Outcome = Union[Success, RescueError]


def build_response(outcome: Outcome) -> ApiResponse:
    """Turn a Success or a RescueError into the response envelope."""
    if isinstance(outcome, RescueError):
        return error_response(outcome)

    if outcome.payload is None:
        return ApiResponse(status_code=outcome.status_code)

    try:
        body = encode(outcome.payload)
    except EncodingError as e:
        return error_response(e)

    return ApiResponse(status_code=outcome.status_code, body=body, headers=dict(JSON_HEADERS))


def error_response(error: RescueError) -> ApiResponse:
    # Only the public message leaves the process; context stays in the logs
    return ApiResponse(
        status_code=error.status_code,
        body=error.message,
        headers=dict(TEXT_HEADERS),
    )
