from __future__ import annotations

import secrets

from ..core.exceptions import FatalEntropyError

SCHEMA_PREFIX = "py_test_"
NAME_BYTES = 8


def generate_schema_name(prefix: str = SCHEMA_PREFIX) -> str:
    """Return a random schema name such as ``py_test_1f0c9a3e5b7d2c44``.

    Uniqueness rests on 64 random bits alone; the server is never asked
    whether the name is already taken.

    Raises
    ------
    FatalEntropyError
        If the system random source cannot supply bytes.
    """
    try:
        raw = secrets.token_bytes(NAME_BYTES)
    except (OSError, NotImplementedError) as e:
        raise FatalEntropyError(f"cannot read random bytes: {e}") from e
    return f"{prefix}{raw.hex()}"


def quote_ident(name: str) -> str:
    """Quote ``name`` as a PostgreSQL identifier."""
    escaped = name.replace('"', '""')
    return f'"{escaped}"'
