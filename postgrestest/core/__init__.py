"""Core module exports."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
    "DatabaseConnectionError",
    "DisabledError",
    "FatalEntropyError",
    "OperationError",
    "OperationTimeoutError",
    "PostgresTestError",
    "SchemaCreationError",
    "SchemaReleasedError",
    "SchemaTeardownError",
]
