"""Disposable PostgreSQL schemas for test suites.

Each `EphemeralSchema` is a uniquely named schema on a shared server with a
connection scoped to it. Creation and teardown statements run under a
deadline, and ``PGTESTKEEPDB`` keeps a schema around for post-mortem
inspection.
"""

from __future__ import annotations

from .core.exceptions import (
    DatabaseConnectionError,
    DisabledError,
    FatalEntropyError,
    OperationError,
    OperationTimeoutError,
    PostgresTestError,
    SchemaCreationError,
    SchemaReleasedError,
    SchemaTeardownError,
)
from .logger import LoggingConfig, configure_logging
from .postgres import EphemeralSchema, PostgresTestSettings, acreate_schema, generate_schema_name
from .resilience import DEFAULT_TIMEOUT, arun_bounded

__all__ = [
    "DEFAULT_TIMEOUT",
    "DatabaseConnectionError",
    "DisabledError",
    "EphemeralSchema",
    "FatalEntropyError",
    "LoggingConfig",
    "OperationError",
    "OperationTimeoutError",
    "PostgresTestError",
    "PostgresTestSettings",
    "SchemaCreationError",
    "SchemaReleasedError",
    "SchemaTeardownError",
    "acreate_schema",
    "arun_bounded",
    "configure_logging",
    "generate_schema_name",
]
