from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .signals import Provider


class ExperienceEntry(BaseModel):
    """Employment history entry."""

    company: str = ""
    title: str = ""
    start: str | None = None
    end: str | None = None
    employment_type: str | None = None
    summary: str = ""

    model_config = ConfigDict(extra="forbid")


class CandidateRecord(BaseModel):
    """Roster entry: who the candidate is and where to find them."""

    candidate_id: str
    name: str | None = None
    location: str | None = None
    current_title: str | None = None
    current_company: str | None = None
    experience_years: float = Field(default=0.0, ge=0.0)
    skills: list[str] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)
    bio: str | None = None
    experiences: list[ExperienceEntry] = Field(default_factory=list)
    average_tenure_years: float | None = Field(default=None, gt=0.0)
    identities: dict[Provider, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    def identities_present(self) -> dict[Provider, str]:
        return {provider: handle for provider, handle in self.identities.items() if handle}
