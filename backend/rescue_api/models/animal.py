"""
Animal Rescue API — Animal SQLAlchemy Model
============================================

What:  ORM model representing the `animals` table.
Who:   Used by AnimalRepository for statements, and by tests to create the schema.

Table Design:
    - Integer primary key generated by the store (SERIAL on PostgreSQL,
      rowid on SQLite). Assigned once on INSERT, never updated.
    - Four NOT NULL text columns: name, species, arrival_date, status.
      Empty strings satisfy them; no CHECK constraint rejects blanks.
    - Eleven nullable columns for the optional attributes. NULL means "not
      recorded", distinct from "" or 0.
    - Dates are kept as text exactly as the client sent them.

Column order:
    ANIMAL_COLUMNS lists the columns in the fixed order the repository binds
    and reads them. It must line up one-to-one with schemas.animal.ANIMAL_FIELDS.
"""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rescue_api.database import Base


class AnimalRecord(Base):
    """A shelter animal row. Created by POST, overwritten by PATCH, removed by DELETE."""

    __tablename__ = "animals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    species: Mapped[str] = mapped_column(String(100), nullable=False)
    breed: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    sex: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    arrival_date: Mapped[str] = mapped_column(String(50), nullable=False)
    health_status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sterilisation_status: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    chip_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    internal_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reason_onboarded: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    latest_vaccination_date: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    current_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<AnimalRecord(id={self.id}, name='{self.name}', status='{self.status}')>"


animals_table = AnimalRecord.__table__

ANIMAL_COLUMNS = (
    animals_table.c.id,
    animals_table.c.name,
    animals_table.c.species,
    animals_table.c.breed,
    animals_table.c.age,
    animals_table.c.sex,
    animals_table.c.description,
    animals_table.c.arrival_date,
    animals_table.c.health_status,
    animals_table.c.sterilisation_status,
    animals_table.c.chip_number,
    animals_table.c.internal_notes,
    animals_table.c.reason_onboarded,
    animals_table.c.latest_vaccination_date,
    animals_table.c.current_location,
    animals_table.c.status,
)

# Everything but the primary key, in bind order for INSERT and UPDATE
WRITABLE_COLUMNS = ANIMAL_COLUMNS[1:]
