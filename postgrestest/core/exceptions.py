"""Exception hierarchy for ephemeral test schemas.

All reportable failures derive from `PostgresTestError`. `FatalEntropyError`
is deliberately kept outside that hierarchy: a host that cannot produce random
bytes cannot produce unique schema names, and callers should not treat that as
an ordinary, skippable failure.
"""

from __future__ import annotations


class PostgresTestError(Exception):
    """Base class for every error raised by postgrestest."""


class DisabledError(PostgresTestError):
    """Postgres testing has been explicitly disabled.

    This is a sentinel rather than a failure: callers are expected to skip
    the test that asked for a schema.
    """

    def __init__(self, message: str = "postgres testing is disabled") -> None:
        super().__init__(message)


class OperationError(PostgresTestError):
    """A bounded operation completed with an error."""

    def __init__(self, description: str, cause: BaseException | None = None) -> None:
        self.description = description
        message = f"cannot {description}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class OperationTimeoutError(OperationError, TimeoutError):
    """A bounded operation did not finish before its deadline."""

    def __init__(self, description: str, timeout: float) -> None:
        self.description = description
        self.timeout = timeout
        PostgresTestError.__init__(self, f"timed out trying to {description}")


class DatabaseConnectionError(PostgresTestError):
    """Opening a connection to the server failed."""


class _SchemaOperationError(PostgresTestError):
    def __init__(self, name: str, error: OperationError) -> None:
        self.name = name
        super().__init__(str(error))

    @property
    def timed_out(self) -> bool:
        """Whether the underlying bounded operation hit its deadline."""
        return isinstance(self.__cause__, OperationTimeoutError)


class SchemaCreationError(_SchemaOperationError):
    """Creating the test schema failed or timed out.

    ``cleanup_error`` holds the failure of the follow-up connection close, if
    that failed too.
    """

    def __init__(self, name: str, error: OperationError, cleanup_error: OperationError | None = None) -> None:
        super().__init__(name, error)
        self.cleanup_error = cleanup_error
        if cleanup_error is not None:
            self.add_note(f"cleanup also failed: {cleanup_error}")


class SchemaTeardownError(_SchemaOperationError):
    """Dropping the test schema or closing its connection failed or timed out."""


class SchemaReleasedError(PostgresTestError):
    """The schema handle was used after a completed teardown."""


class FatalEntropyError(RuntimeError):
    """The system random source could not supply bytes."""
