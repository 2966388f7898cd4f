"""
Animal Rescue API — Animal Repository (Persistence Gateway)
============================================================

What:  Translates the five CRUD intents into parameterized SQL statements.
How:   SQLAlchemy Core statements built from ANIMAL_COLUMNS, executed through
       the injected Database handle. Row values map onto Animal attributes by
       position.
Who:   Called by the RequestDispatcher; owns no HTTP concerns.

Statements:
    list_all      SELECT <16 columns> FROM animals
    create        INSERT INTO animals (<15 columns>) VALUES (...) RETURNING id
    get_by_id     SELECT <16 columns> FROM animals WHERE id = :id
    replace       UPDATE animals SET <15 columns> WHERE id = :id
    delete_by_id  DELETE FROM animals WHERE id = :id

Error Handling Strategy:
    Every store failure becomes a PersistenceError whose message is a fixed,
    generic sentence per operation. The driver detail goes to the log and the
    error context. Missing rows are not special: a get_by_id with no match is
    a PersistenceError like any other. replace and delete_by_id succeed even
    when no row matched.
"""

import logging
from typing import List, NoReturn, Sequence

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from rescue_api.database import Database
from rescue_api.exceptions import PersistenceError
from rescue_api.models.animal import ANIMAL_COLUMNS, WRITABLE_COLUMNS, animals_table
from rescue_api.schemas.animal import ANIMAL_FIELDS, Animal

logger = logging.getLogger(__name__)

# Store failures the repository translates. OSError covers sockets dropped
# below the driver.
STORE_ERRORS = (SQLAlchemyError, OSError)


def animal_from_row(row: Sequence) -> Animal:
    """Build an Animal from a 16-value row in ANIMAL_COLUMNS order."""
    return Animal(**dict(zip(ANIMAL_FIELDS, row)))


def bind_values(animal: Animal) -> dict:
    """Column-keyed parameters for INSERT/UPDATE, every writable column included."""
    return {
        column.key: getattr(animal, field)
        for column, field in zip(WRITABLE_COLUMNS, ANIMAL_FIELDS[1:])
    }


class AnimalRepository:
    """
    Persistence gateway for Animal records.

    Each method is one round trip in its own transaction. No retries.
    """

    def __init__(self, database: Database):
        self.database = database

    async def list_all(self) -> List[Animal]:
        """Every animal in store order (no ORDER BY)."""
        statement = select(*ANIMAL_COLUMNS)
        try:
            rows = await self.database.fetch_all(statement)
        except STORE_ERRORS as e:
            self._fail("list_all", "Failed to fetch animals", e)

        animals = [animal_from_row(row) for row in rows]
        logger.info("Successfully fetched all animals (%d)", len(animals))
        return animals

    async def create(self, animal: Animal) -> Animal:
        """
        Insert a new animal and bind the store-generated id.

        Any id on the incoming model is ignored.
        """
        statement = (
            insert(animals_table)
            .values(bind_values(animal))
            .returning(animals_table.c.id)
        )
        try:
            row = await self.database.fetch_one(statement)
        except STORE_ERRORS as e:
            self._fail("create", "Failed to create animal", e)

        animal_id = row[0]
        logger.info("Successfully created animal with ID %d", animal_id)
        return animal.model_copy(update={"id": animal_id})

    async def get_by_id(self, animal_id: int) -> Animal:
        """
        Fetch one animal.

        Raises:
            PersistenceError: Store failure, including "no row with this id"
        """
        statement = select(*ANIMAL_COLUMNS).where(animals_table.c.id == animal_id)
        try:
            row = await self.database.fetch_one(statement)
        except STORE_ERRORS as e:
            self._fail("get_by_id", "Failed to fetch animal by ID", e, animal_id=animal_id)

        logger.info("Successfully fetched animal with ID %d", animal_id)
        return animal_from_row(row)

    async def replace(self, animal_id: int, animal: Animal) -> Animal:
        """
        Overwrite every column of an animal (full replace).

        Optional attributes that are None are written as NULL. The id is not
        checked for existence; zero affected rows is still a success.
        """
        statement = (
            update(animals_table)
            .where(animals_table.c.id == animal_id)
            .values(bind_values(animal))
        )
        try:
            affected = await self.database.execute(statement)
        except STORE_ERRORS as e:
            self._fail("replace", "Failed to update animal", e, animal_id=animal_id)

        if affected == 0:
            logger.debug("Replace of animal %d matched no rows", animal_id)
        logger.info("Successfully updated animal with ID %d", animal_id)
        return animal.model_copy(update={"id": animal_id})

    async def delete_by_id(self, animal_id: int) -> None:
        """Delete an animal. Deleting a missing id is a no-op success."""
        statement = delete(animals_table).where(animals_table.c.id == animal_id)
        try:
            await self.database.execute(statement)
        except STORE_ERRORS as e:
            self._fail("delete_by_id", "Failed to delete animal", e, animal_id=animal_id)

        logger.info("Successfully deleted animal with ID %d", animal_id)

    def _fail(self, operation: str, message: str, error: BaseException, **context) -> NoReturn:
        if "animal_id" in context:
            logger.error("%s (ID %d): %s", message, context["animal_id"], error)
        else:
            logger.error("%s: %s", message, error)
        raise PersistenceError(
            message=message,
            operation=operation,
            context={**context, "error_type": type(error).__name__, "error": str(error)},
        ) from error
