"""Ephemeral PostgreSQL schemas backed by asyncpg.

- `EphemeralSchema`: one live, randomly named schema plus its connection
- `PostgresTestSettings`: ``PGTEST*`` switches and connection settings

Usage
-----
::

    db = await acreate_schema()
    try:
        await db.aexecute("CREATE TABLE x (id text, val text)")
    finally:
        await db.ateardown()
"""

from .config import PostgresTestSettings, RetentionSettings
from .naming import SCHEMA_PREFIX, generate_schema_name, quote_ident
from .retention import report_retained, retention_statements
from .schema import EphemeralSchema, IsolationLevel, acreate_schema

__all__ = [
    "SCHEMA_PREFIX",
    "EphemeralSchema",
    "IsolationLevel",
    "PostgresTestSettings",
    "RetentionSettings",
    "acreate_schema",
    "generate_schema_name",
    "quote_ident",
    "report_retained",
    "retention_statements",
]
