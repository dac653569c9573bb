from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TIMEOUT: float = 5.0


class BoundedConfig(BaseModel):
    """Deadline applied to a single bounded operation.

    DDL statements can block on locks held by other sessions; the deadline turns
    such a hang into an actionable failure.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Deadline in seconds")
