"\"\"\"Candidate roster lookup.\"\"\""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from .schemas.candidate import CandidateRecord


@runtime_checkable
class CandidateDirectory(Protocol):
    """Roster lookup contract implemented by the persistence layer."""

    def get(self, candidate_id: str) -> CandidateRecord | None:
        """Return the record for ``candidate_id`` or None when unknown."""

    def all(self) -> list[CandidateRecord]:
        """Return every known record."""

    def add_many(self, records: Iterable[CandidateRecord]) -> None:
        """Insert or replace records by candidate id."""


class InMemoryCandidateDirectory:
    """Dictionary-backed directory, typically loaded from a roster file."""

    def __init__(self, records: Iterable[CandidateRecord] = ()) -> None:
        self._records: dict[str, CandidateRecord] = {}
        self.add_many(records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, candidate_id: str) -> CandidateRecord | None:
        return self._records.get(candidate_id)

    def all(self) -> list[CandidateRecord]:
        return list(self._records.values())

    def add(self, record: CandidateRecord) -> None:
        self._records[record.candidate_id] = record

    def add_many(self, records: Iterable[CandidateRecord]) -> None:
        for record in records:
            self.add(record)
