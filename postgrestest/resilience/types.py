from __future__ import annotations

from collections.abc import Awaitable, Callable

type Work[T] = Callable[[], Awaitable[T]]
