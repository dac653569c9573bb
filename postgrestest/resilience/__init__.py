from __future__ import annotations

from .bounded import abandoned_count, arun_bounded
from .config import DEFAULT_TIMEOUT, BoundedConfig

__all__ = [
    "DEFAULT_TIMEOUT",
    "BoundedConfig",
    "abandoned_count",
    "arun_bounded",
]
