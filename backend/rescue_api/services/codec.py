"""
Animal Rescue API — Resource Codec
===================================

What:  JSON body ↔ Animal conversion.
How:   Pydantic `model_validate_json` for decoding, `dump_json` with
       `by_alias=True, exclude_none=True` for encoding, so optional attributes
       that are None never appear in a response.
Who:   Called by the dispatcher (decode) and the response builder (encode).

Scope:
    Decoding is structural only. A body that parses as an Animal-shaped JSON
    object is accepted even if required text fields are empty or missing.
"""

import logging
from typing import List, Optional, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaValidationError
from pydantic_core import PydanticSerializationError

from rescue_api.exceptions import EncodingError, ValidationError
from rescue_api.schemas.animal import Animal

logger = logging.getLogger(__name__)

_animal_list = TypeAdapter(List[Animal])

Payload = Union[Animal, List[Animal]]


def decode_animal(body: Optional[Union[bytes, str]]) -> Animal:
    """
    Parse a request body into an Animal.

    Raises:
        ValidationError: Body missing, not JSON, not an object, or a field of
            the wrong JSON type. Message is always "Invalid request body".
    """
    if not body:
        logger.warning("Failed to decode request body: body is empty")
        raise ValidationError(message="Invalid request body", context={"reason": "empty body"})

    try:
        return Animal.model_validate_json(body)
    except SchemaValidationError as e:
        problems = [
            {"loc": ".".join(str(part) for part in err["loc"]), "type": err["type"]}
            for err in e.errors()
        ]
        logger.warning("Failed to decode request body: %s", problems)
        raise ValidationError(
            message="Invalid request body",
            context={"errors": problems},
        ) from e


def encode(payload: Payload) -> str:
    """
    Serialize one Animal or a list of Animals to JSON text.

    Raises:
        EncodingError: Pydantic could not serialize the payload
    """
    is_collection = isinstance(payload, list)
    try:
        if is_collection:
            data = _animal_list.dump_json(payload, by_alias=True, exclude_none=True)
        else:
            data = payload.model_dump_json(by_alias=True, exclude_none=True)
    except (PydanticSerializationError, ValueError, TypeError) as e:
        logger.error("Failed to encode %s: %s", "animals" if is_collection else "animal", e)
        raise EncodingError(
            message="Failed to encode animals" if is_collection else "Failed to encode animal",
            context={"error": str(e)},
        ) from e

    return data.decode("utf-8") if isinstance(data, bytes) else data
