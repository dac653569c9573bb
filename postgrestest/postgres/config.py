"""Environment-driven settings for ephemeral test schemas.

Server location and credentials are left to asyncpg: unless ``dsn`` is given,
it reads the standard libpq ``PG*`` environment variables (``PGHOST``,
``PGPORT``, ``PGUSER``, ``PGPASSWORD``, ``PGDATABASE``, ...).
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..resilience.config import DEFAULT_TIMEOUT
from .naming import SCHEMA_PREFIX


def _non_empty_is_true(value: Any) -> Any:
    # Any non-empty value switches the flag on, "0" and "false" included.
    if isinstance(value, str):
        return value != ""
    return value


class RetentionSettings(BaseSettings):
    """Only the keep switch, read by teardown at call time.

    Teardown reads nothing else from the environment, so an unrelated bad
    ``PGTEST*`` value cannot make it fail.
    """

    model_config = SettingsConfigDict(
        env_prefix="PGTEST",
        extra="ignore",
        frozen=True,
    )

    keepdb: bool = Field(default=False, description="Keep schemas on teardown (PGTESTKEEPDB)")

    normalize_switches = field_validator("keepdb", mode="before")(_non_empty_is_true)


class PostgresTestSettings(BaseSettings):
    """Switches and connection settings, read from ``PGTEST*`` variables.

    Examples
    --------
    >>> PostgresTestSettings()  # from the environment
    >>> PostgresTestSettings(disable=False, keepdb=True, timeout=1.0)  # injected
    """

    model_config = SettingsConfigDict(
        env_prefix="PGTEST",
        extra="ignore",
        frozen=True,
    )

    disable: bool = Field(default=False, description="Refuse to create schemas (PGTESTDISABLE)")
    keepdb: bool = Field(default=False, description="Keep schemas on teardown (PGTESTKEEPDB)")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Deadline for each DDL statement and close")
    dsn: str | None = Field(default=None, description="Connection DSN; libpq PG* variables when unset")
    prefix: str = Field(default=SCHEMA_PREFIX, pattern=r"^[a-z_][a-z0-9_]*$", max_length=40)
    application_name: str = Field(default="postgrestest")
    connect_timeout: float = Field(default=10.0, gt=0)

    normalize_switches = field_validator("disable", "keepdb", mode="before")(_non_empty_is_true)

    def to_connect_params(self, schema: str) -> dict[str, Any]:
        """Build ``asyncpg.connect()`` parameters for a session scoped to ``schema``."""
        return {
            "dsn": self.dsn,
            "timeout": self.connect_timeout,
            "server_settings": {
                "search_path": schema,
                "application_name": self.application_name,
            },
        }
