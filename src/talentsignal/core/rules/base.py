"\"\"\"Rule context and isolated rule execution.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, TypeVar

import structlog

from ...schemas.candidate import CandidateRecord
from ...schemas.signals import CompositeScore, SignalBundle

T = TypeVar("T")


@dataclass(slots=True)
class RuleContext:
    """Inputs shared by every rule."""

    record: CandidateRecord
    bundle: SignalBundle
    composite: CompositeScore


Rule = Callable[[RuleContext], Optional[T]]


def run_rules(rules: Iterable[tuple[str, Rule]], context: RuleContext) -> list[T]:
    """Evaluate each rule in isolation; a failing rule contributes nothing."""
    produced: list[T] = []
    for name, rule in rules:
        try:
            result = rule(context)
        except Exception as exc:  # noqa: BLE001
            structlog.get_logger(__name__).warning(
                "rules.rule_failed",
                rule=name,
                candidate_id=context.record.candidate_id,
                error=str(exc),
            )
            continue
        if result is not None:
            produced.append(result)
    return produced
