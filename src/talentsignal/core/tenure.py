"\"\"\"Employment tenure estimation.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

import pendulum

from ..schemas.candidate import CandidateRecord, ExperienceEntry


@dataclass
class TenureConfig:
    """Fallbacks for tenure estimation."""

    default_average_years: float = 2.5
    min_entry_months: float = 1.0


class TenureEstimator:
    """Estimate average tenure and job-switch frequency for a candidate.

    Average tenure comes from dated employment history when available, then
    from the roster's ``average_tenure_years``, then from the configured
    default.
    """

    def __init__(
        self,
        *,
        config: TenureConfig | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._config = config or TenureConfig()
        self._now_provider = now_provider or pendulum.now

    def average_tenure_years(self, record: CandidateRecord) -> tuple[float, str]:
        """Return ``(years, source)`` where source names the fallback used."""
        months = self._history_months(record.experiences)
        if months:
            return sum(months) / len(months) / 12.0, "employment_history"
        if record.average_tenure_years:
            return float(record.average_tenure_years), "record"
        return self._config.default_average_years, "default"

    def estimated_switches(self, record: CandidateRecord) -> tuple[float, float, str]:
        average, source = self.average_tenure_years(record)
        if average <= 0:
            return 0.0, average, source
        return record.experience_years / average, average, source

    def _history_months(self, experiences: Iterable[ExperienceEntry]) -> list[float]:
        as_of = pendulum.instance(self._now_provider())
        durations: list[float] = []
        for experience in experiences:
            start = _parse_date(experience.start)
            if start is None:
                continue
            end = _parse_date(experience.end, default=as_of)
            if end is None or end < start:
                continue
            months = end.diff(start).in_months()
            if months >= self._config.min_entry_months:
                durations.append(float(months))
        return durations


def _parse_date(value: str | None, *, default: pendulum.DateTime | None = None) -> pendulum.DateTime | None:
    if not value:
        return default
    try:
        if len(value) == 7 and value[4] == "-":
            return pendulum.datetime(int(value[:4]), int(value[5:7]), 1)
        parsed = pendulum.parse(value)
    except ValueError:
        return default
    return parsed if isinstance(parsed, pendulum.DateTime) else default
