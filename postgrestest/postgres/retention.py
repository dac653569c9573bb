from __future__ import annotations

import sys
from typing import TextIO

from .naming import quote_ident


def retention_statements(name: str) -> tuple[str, str]:
    """SQL to inspect a retained schema and to remove it by hand."""
    ident = quote_ident(name)
    return f"SET search_path TO {ident};", f"DROP SCHEMA {ident} CASCADE;"


def report_retained(name: str, stream: TextIO | None = None) -> None:
    """Write the two retention lines for ``name`` to ``stream`` (stderr by default)."""
    out = stream if stream is not None else sys.stderr
    inspect_sql, drop_sql = retention_statements(name)
    print(f"postgrestest: keeping test schema {name}", file=out)
    print(f"postgrestest: inspect with '{inspect_sql}' and remove with '{drop_sql}'", file=out)
    out.flush()
