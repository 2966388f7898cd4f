"""
Animal Rescue API — Animal Wire Schema
=======================================

What:  Pydantic model for the Animal entity as it travels over the wire.
How:   camelCase aliases on the wire, snake_case attributes in Python.
       Strict types: "age": "3" is rejected, not coerced.
Who:   Decoded from request bodies by the codec, built from rows by the
       repository, encoded back to JSON by the codec.

Field states:
    Required text (name, species, arrivalDate, status):
        absent or null → ""   (no emptiness check; the store decides)
    Optional (the eleven remaining attributes):
        absent  → None, key not in model_fields_set
        null    → None, key in model_fields_set
        present → value
    id:
        ignored on input by the repository; always set on output
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class Animal(BaseModel):
    """
    A shelter animal.

    PATCH replaces the whole entity with this model: any optional attribute
    left out of the payload is stored as NULL, not left unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
    )

    id: Optional[int] = None
    name: str = ""
    species: str = ""
    breed: Optional[str] = None
    age: Optional[int] = None
    sex: Optional[str] = None
    description: Optional[str] = None
    arrival_date: str = ""
    health_status: Optional[str] = None
    sterilisation_status: Optional[bool] = None
    chip_number: Optional[str] = None
    internal_notes: Optional[str] = None
    reason_onboarded: Optional[str] = None
    latest_vaccination_date: Optional[str] = None
    current_location: Optional[str] = None
    status: str = ""

    @field_validator("name", "species", "arrival_date", "status", mode="before")
    @classmethod
    def null_text_as_empty(cls, v: Any) -> Any:
        """An explicit null in a required text field reads as the empty string."""
        return "" if v is None else v


# Attribute order shared with models.animal.ANIMAL_COLUMNS
ANIMAL_FIELDS: List[str] = list(Animal.model_fields)

REQUIRED_FIELDS = ("name", "species", "arrival_date", "status")
OPTIONAL_FIELDS = tuple(
    name for name in ANIMAL_FIELDS if name != "id" and name not in REQUIRED_FIELDS
)
