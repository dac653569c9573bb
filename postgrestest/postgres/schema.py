"""Ephemeral PostgreSQL schemas for tests.

`EphemeralSchema.acreate()` connects with ``search_path`` pointing at a fresh,
randomly named schema and creates it; `EphemeralSchema.ateardown()` drops the
schema with everything in it and closes the connection. Both DDL statements
and the close are bounded by a deadline so that a session holding locks turns
into a reported failure instead of a hung test run.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Literal, Self

import asyncpg
from asyncpg import Connection, Record

from ..core.exceptions import (
    DatabaseConnectionError,
    DisabledError,
    OperationError,
    SchemaCreationError,
    SchemaReleasedError,
    SchemaTeardownError,
)
from ..logger import get_logger
from ..resilience.bounded import arun_bounded
from .config import PostgresTestSettings, RetentionSettings
from .naming import generate_schema_name, quote_ident
from .retention import report_retained

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable, Sequence
    from types import TracebackType

logger = get_logger(__name__)

type IsolationLevel = Literal["read_uncommitted", "read_committed", "repeatable_read", "serializable"]

CLOSE_DESCRIPTION = "close test db"


class EphemeralSchema:
    """A live test schema plus the connection that owns it.

    The caller owns the handle and must tear it down; nothing is dropped on
    garbage collection.

    Examples
    --------
    >>> async with await EphemeralSchema.acreate() as db:
    ...     await db.aexecute("CREATE TABLE x (id text, val text)")
    ...     await db.afetchval("SELECT count(*) FROM x")

    >>> db = await acreate_schema(PostgresTestSettings(timeout=2.0))
    >>> try:
    ...     ...
    ... finally:
    ...     await db.ateardown()
    """

    __slots__ = ("_connection", "_name", "_settings")

    def __init__(self, name: str, connection: Connection[Record], settings: PostgresTestSettings) -> None:
        self._name = name
        self._connection: Connection[Record] | None = connection
        self._settings = settings

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None and exc_val is not None:
            logger.error(
                "EphemeralSchema context manager exiting with exception",
                schema=self._name,
                exc_type=exc_type.__name__,
                exc_val=str(exc_val),
            )
        await self.ateardown()

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"<EphemeralSchema {self._name} ({state})>"

    @classmethod
    async def acreate(cls, settings: PostgresTestSettings | None = None) -> Self:
        """Create a randomly named schema and return a handle bound to it.

        Parameters
        ----------
        settings
            Switches and connection settings. Read from the environment when
            omitted.

        Raises
        ------
        DisabledError
            If testing is disabled. Nothing is sent to the server.
        DatabaseConnectionError
            If no connection could be opened.
        SchemaCreationError
            If ``CREATE SCHEMA`` failed or timed out. The connection has been
            closed (or closing it failed too, see ``cleanup_error``).
        """
        settings = settings if settings is not None else PostgresTestSettings()
        if settings.disable:
            raise DisabledError

        name = generate_schema_name(settings.prefix)

        try:
            conn = await asyncpg.connect(**settings.to_connect_params(name))
        except Exception as e:
            raise DatabaseConnectionError(f"cannot open database: {e}") from e

        create_sql = f"CREATE SCHEMA {quote_ident(name)}"
        try:
            await arun_bounded(
                lambda: conn.execute(create_sql),
                description=f"create test schema {name}",
                timeout=settings.timeout,
            )
        except OperationError as create_error:
            cleanup_error = await _aclose_for_cleanup(conn, settings.timeout)
            logger.error(
                "Test schema creation failed",
                schema=name,
                error=str(create_error),
                cleanup_error=str(cleanup_error) if cleanup_error else None,
            )
            raise SchemaCreationError(name, create_error, cleanup_error) from create_error
        except BaseException:
            # Cancelled mid-create: no handle will ever own the connection.
            cleanup_error = await _aclose_for_cleanup(conn, settings.timeout)
            if cleanup_error is not None:
                logger.warning(
                    "Closing connection after interrupted create failed",
                    schema=name,
                    error=str(cleanup_error),
                )
            raise

        logger.debug("Test schema created", schema=name)
        return cls(name, conn, settings)

    async def ateardown(self, settings: PostgresTestSettings | None = None) -> None:
        """Drop the schema with everything in it and close the connection.

        A second call after a completed teardown does nothing. If the keep
        switch is on, nothing is dropped or closed; instead the schema name and
        the SQL to inspect and remove it are written to stderr.

        Parameters
        ----------
        settings
            Overrides for this teardown. When omitted the keep switch is read
            from the environment now and the deadline from creation is reused.

        Raises
        ------
        SchemaTeardownError
            If the drop or the close failed or timed out. The handle stays
            live, so the teardown may be attempted again.
        """
        if self._connection is None:
            return

        if settings is None:
            keep = RetentionSettings().keepdb
            timeout = self._settings.timeout
        else:
            keep = settings.keepdb
            timeout = settings.timeout

        if keep:
            report_retained(self._name)
            logger.warning("Test schema retained", schema=self._name)
            return

        conn = self._connection
        drop_sql = f"DROP SCHEMA {quote_ident(self._name)} CASCADE"
        try:
            await arun_bounded(
                lambda: conn.execute(drop_sql),
                description=f"drop test schema {self._name}",
                timeout=timeout,
            )
        except OperationError as e:
            raise SchemaTeardownError(self._name, e) from e

        try:
            await arun_bounded(conn.close, description=CLOSE_DESCRIPTION, timeout=timeout)
        except OperationError as e:
            raise SchemaTeardownError(self._name, e) from e

        self._connection = None
        logger.debug("Test schema dropped", schema=self._name)

    async def aclose(self) -> None:
        """Alias for `ateardown` using environment settings."""
        await self.ateardown()

    @property
    def name(self) -> str:
        """The schema name."""
        return self._name

    @property
    def settings(self) -> PostgresTestSettings:
        return self._settings

    @property
    def released(self) -> bool:
        return self._connection is None

    @property
    def connection(self) -> Connection[Record]:
        """The connection owned by this handle.

        Raises
        ------
        SchemaReleasedError
            If the schema has already been torn down.
        """
        if self._connection is None:
            msg = f"test schema {self._name} has been torn down"
            raise SchemaReleasedError(msg)
        return self._connection

    @asynccontextmanager
    async def atransaction(
        self,
        isolation: IsolationLevel = "read_committed",
        *,
        readonly: bool = False,
        deferrable: bool = False,
    ) -> AsyncIterator[Connection[Record]]:
        async with self.connection.transaction(isolation=isolation, readonly=readonly, deferrable=deferrable):
            yield self.connection

    async def aexecute(self, query: str, *args: object, timeout: float | None = None) -> str:
        return await self.connection.execute(query, *args, timeout=timeout)

    async def aexecutemany(self, query: str, args: Iterable[Sequence[object]], timeout: float | None = None) -> None:
        await self.connection.executemany(query, args, timeout=timeout)

    async def afetch(self, query: str, *args: object, timeout: float | None = None) -> list[Record]:
        return await self.connection.fetch(query, *args, timeout=timeout)

    async def afetchrow(self, query: str, *args: object, timeout: float | None = None) -> Record | None:
        return await self.connection.fetchrow(query, *args, timeout=timeout)

    async def afetchval(self, query: str, *args: object, timeout: float | None = None) -> Any:
        return await self.connection.fetchval(query, *args, timeout=timeout)


async def _aclose_for_cleanup(conn: Connection[Record], timeout: float) -> OperationError | None:
    """Close ``conn`` after a failed creation, returning the close failure if any."""
    try:
        await arun_bounded(conn.close, description=CLOSE_DESCRIPTION, timeout=timeout)
    except OperationError as e:
        return e
    return None


async def acreate_schema(settings: PostgresTestSettings | None = None) -> EphemeralSchema:
    """Shorthand for `EphemeralSchema.acreate`."""
    return await EphemeralSchema.acreate(settings)
