"""Shared fixtures for integration tests.

Provides:
- postgres_container: Session-scoped PostgreSQL container
- postgres_settings: PostgresTestSettings pointing at the container
- admin_connection: Plain asyncpg connection for checking the catalog
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, cast

import asyncpg
import pytest

from postgrestest import PostgresTestSettings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from asyncpg import Connection, Record

POSTGRES_USER = "test_user"
POSTGRES_PASSWORD = "test_password"
POSTGRES_DB = "test_db"


class PostgresContainerProtocol(Protocol):
    """Protocol for PostgreSQL container interface."""

    def get_exposed_port(self, port: int) -> int: ...
    def get_container_host_ip(self) -> str: ...
    def start(self) -> PostgresContainerProtocol: ...
    def stop(self) -> None: ...


def _configure_docker_environment() -> None:
    """Set DOCKER_HOST when only the macOS Docker Desktop socket exists."""
    if os.environ.get("DOCKER_HOST"):
        return

    macos_socket = Path.home() / ".docker" / "run" / "docker.sock"
    if macos_socket.exists():
        os.environ["DOCKER_HOST"] = f"unix://{macos_socket}"


def _check_docker_available() -> bool:
    """Check if the Docker daemon answers a ping."""
    try:
        from docker import from_env  # type: ignore[import-untyped]
        from docker.errors import DockerException  # type: ignore[import-untyped]
    except ImportError:
        return False

    try:
        from_env().ping()
    except DockerException:
        return False
    return True


def _create_postgres_container() -> PostgresContainerProtocol:
    from testcontainers.postgres import PostgresContainer  # type: ignore[import-untyped]

    container = PostgresContainer(
        "postgres:16-alpine",
        username=POSTGRES_USER,
        password=POSTGRES_PASSWORD,
        dbname=POSTGRES_DB,
    )
    return cast(PostgresContainerProtocol, container)


@pytest.fixture(scope="session")
def postgres_container() -> Iterator[PostgresContainerProtocol]:
    """Provide session-scoped PostgreSQL container.

    Skips:
        If Docker daemon is not available.
    """
    _configure_docker_environment()

    if not _check_docker_available():
        pytest.skip("Docker daemon not available; integration tests need a PostgreSQL container.")

    try:
        container = _create_postgres_container()
    except ImportError as e:
        pytest.skip(f"testcontainers not installed: {e}")

    container.start()

    try:
        yield container
    finally:
        container.stop()


@pytest.fixture
def postgres_dsn(postgres_container: PostgresContainerProtocol) -> str:
    host = postgres_container.get_container_host_ip()
    port = postgres_container.get_exposed_port(5432)
    return f"postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{host}:{port}/{POSTGRES_DB}"


@pytest.fixture
def postgres_settings(postgres_dsn: str) -> PostgresTestSettings:
    return PostgresTestSettings(dsn=postgres_dsn, timeout=5.0)


@pytest.fixture
async def admin_connection(postgres_dsn: str) -> AsyncIterator[Connection[Record]]:
    conn = await asyncpg.connect(dsn=postgres_dsn)
    try:
        yield conn
    finally:
        await conn.close()
