from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .signals import Provider
from .snapshot import Severity


class DetectedChange(BaseModel):
    """Material difference between two polls of the same candidate."""

    provider: Provider
    field: str
    previous: Any = None
    current: Any = None
    description: str

    model_config = ConfigDict(extra="forbid", frozen=True)


class RiskAlert(BaseModel):
    """Notification that a monitored candidate changed between polls."""

    alert_id: str
    candidate_id: str
    changes: list[DetectedChange] = Field(default_factory=list)
    severity: Severity
    created_at: datetime
    resolved: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)
