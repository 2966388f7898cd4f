"""
Animal Rescue API — Database Credential Resolution
===================================================

What:  Turns configuration into a database URL, fetching credentials from
       AWS Secrets Manager when a secret ARN is configured.
How:   boto3 `secretsmanager.get_secret_value` → JSON secret string →
       `DatabaseCredentials` (Pydantic, all keys required and non-empty) →
       `sqlalchemy.engine.URL` for the asyncpg driver.
When:  Once, during application startup. Every failure is an
       InitializationError; the caller lets it abort startup.

Secret format:
    {
        "DB_HOST": "db.internal",
        "DB_PORT": "5432",
        "DB_USERNAME": "rescue",
        "DB_PASSWORD": "...",
        "DB_NAME": "animalrescue",
        "DB_SSLMODE": "require"
    }
"""

import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from rescue_api.config import Settings
from rescue_api.exceptions import InitializationError

logger = logging.getLogger(__name__)


class DatabaseCredentials(BaseModel):
    """Connection parameters as stored in the secret."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    host: str = Field(alias="DB_HOST", min_length=1)
    port: str = Field(alias="DB_PORT", min_length=1, pattern=r"^\d+$")
    username: str = Field(alias="DB_USERNAME", min_length=1)
    password: str = Field(alias="DB_PASSWORD", min_length=1)
    name: str = Field(alias="DB_NAME", min_length=1)
    sslmode: str = Field(alias="DB_SSLMODE", min_length=1)

    def to_url(self, drivername: str = "postgresql+asyncpg") -> URL:
        return URL.create(
            drivername,
            username=self.username,
            password=self.password,
            host=self.host,
            port=int(self.port),
            database=self.name,
            query={"ssl": self.sslmode},
        )


def fetch_database_credentials(
    secret_arn: str,
    region: str,
    client: Optional[Any] = None,
) -> DatabaseCredentials:
    """
    Fetch and parse database credentials from Secrets Manager.

    Args:
        secret_arn: ARN (or name) of the secret
        region: AWS region the secret lives in
        client: Pre-built secretsmanager client (tests inject a stub)

    Raises:
        InitializationError: The secret is unreachable, not JSON, or incomplete
    """
    if client is None:
        client = boto3.client("secretsmanager", region_name=region)

    try:
        result = client.get_secret_value(SecretId=secret_arn)
    except (BotoCoreError, ClientError) as e:
        logger.error("Failed to get secret value: %s", e)
        raise InitializationError(
            message="Failed to fetch database credentials",
            context={"secret_arn": secret_arn, "error": str(e)},
        ) from e

    secret_string = result.get("SecretString")
    if not secret_string:
        logger.error("Secret %s has no SecretString", secret_arn)
        raise InitializationError(
            message="Database credentials secret is empty",
            context={"secret_arn": secret_arn},
        )

    try:
        credentials = DatabaseCredentials.model_validate_json(secret_string)
    except SchemaValidationError as e:
        logger.error("Database credentials are not set correctly: %d problem(s)", e.error_count())
        raise InitializationError(
            message="Database credentials are not set correctly",
            context={"secret_arn": secret_arn, "fields": [err["loc"] for err in e.errors()]},
        ) from e

    logger.info("Successfully fetched database credentials from Secrets Manager")
    return credentials


def resolve_database_url(settings: Settings, client: Optional[Any] = None) -> URL:
    """
    Decide which database URL the process connects to.

    Secret ARN wins over DATABASE_URL; the URL form is parsed so a typo
    fails here rather than on the first query.
    """
    if settings.uses_secret_store:
        credentials = fetch_database_credentials(
            settings.db_secret_arn.strip(), settings.aws_region, client=client
        )
        return credentials.to_url()

    try:
        return make_url(settings.database_url)
    except ArgumentError as e:
        logger.error("DATABASE_URL is not a valid database URL")
        raise InitializationError(
            message="DATABASE_URL is not a valid database URL",
            context={"error": type(e).__name__},
        ) from e
