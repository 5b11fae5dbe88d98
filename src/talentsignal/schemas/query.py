from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .signals import Provider

RequirementCategory = Literal["skills", "experience", "location", "industry", "culture"]
Provenance = Literal["explicit", "inferred"]
PrecisionTier = Literal["broad", "targeted", "precise"]


class Requirement(BaseModel):
    """One structured, weighted fact extracted from a hiring query."""

    category: RequirementCategory
    value: str
    importance: float = Field(ge=0.0, le=1.0)
    provenance: Provenance = "explicit"

    model_config = ConfigDict(extra="forbid", frozen=True)


class QueryInterpretation(BaseModel):
    """Structured reading of a free-text hiring query."""

    original_query: str
    requirements: list[Requirement] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    interpreted_intent: str = ""
    search_strategy: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)

    def by_category(self, category: RequirementCategory) -> list[Requirement]:
        return [req for req in self.requirements if req.category == category]

    def categories(self) -> set[str]:
        return {req.category for req in self.requirements}


class PlatformQuery(BaseModel):
    """Provider-side search string at one precision tier."""

    provider: Provider
    tier: PrecisionTier
    query: str
    keywords: list[str] = Field(default_factory=list)
    expected_results: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class SearchPlan(BaseModel):
    """Per-provider queries handed to the shortlist collaborator."""

    queries: list[PlatformQuery] = Field(default_factory=list)
    total_expected_results: int = 0
    strategy: str = ""
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    model_config = ConfigDict(extra="forbid", frozen=True)
