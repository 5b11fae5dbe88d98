"\"\"\"Independent badge and risk rules applied when building snapshots.\"\"\""

from __future__ import annotations

from .badges import BadgeConfig, BadgeRules
from .base import RuleContext, run_rules
from .risks import RiskConfig, RiskRules

__all__ = [
    "BadgeConfig",
    "BadgeRules",
    "RiskConfig",
    "RiskRules",
    "RuleContext",
    "run_rules",
]
