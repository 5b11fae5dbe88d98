"\"\"\"Raw payload models returned by provider transports.\"\"\""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .signals import ActivityItem


class ProviderPayload(BaseModel):
    """Common payload envelope; unknown keys are ignored."""

    recent_activity: list[ActivityItem] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class RepositoryPayload(BaseModel):
    name: str
    stars: int = Field(default=0, ge=0)
    language: str | None = None
    topics: list[str] = Field(default_factory=list)
    created_at: datetime | None = None

    model_config = ConfigDict(extra="ignore")


class CodeHostingPayload(ProviderPayload):
    public_repos: int = Field(default=0, ge=0)
    followers: int = Field(default=0, ge=0)
    total_stars: int | None = Field(default=None, ge=0)
    contributions_last_year: int = Field(default=0, ge=0)
    languages: list[str] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)
    repositories: list[RepositoryPayload] = Field(default_factory=list)
    hireable: bool = False
    bio: str = ""


class BadgeCounts(BaseModel):
    gold: int = Field(default=0, ge=0)
    silver: int = Field(default=0, ge=0)
    bronze: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="ignore")


class ReputationPayload(ProviderPayload):
    reputation: int = Field(default=0, ge=0)
    answer_count: int = Field(default=0, ge=0)
    question_count: int = Field(default=0, ge=0)
    accepted_answer_count: int = Field(default=0, ge=0)
    top_tags: list[str] = Field(default_factory=list)
    badges: BadgeCounts = Field(default_factory=BadgeCounts)


class NetworkPayload(ProviderPayload):
    headline: str = ""
    connections: int = Field(default=0, ge=0)
    recommendations: int = Field(default=0, ge=0)
    experience_years: float = Field(default=0.0, ge=0.0)
    skills: list[str] = Field(default_factory=list)
    open_to_work: bool = False
    profile_updated_at: datetime | None = None
    connections_added_30d: int = Field(default=0, ge=0)
    recently_added_skills: list[str] = Field(default_factory=list)


class MicroblogPayload(ProviderPayload):
    followers: int = Field(default=0, ge=0)
    following: int = Field(default=0, ge=0)
    posts_last_90_days: int = Field(default=0, ge=0)
    tech_post_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    bio: str = ""


class ForumPayload(ProviderPayload):
    karma: int = Field(default=0, ge=0)
    post_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    communities: list[str] = Field(default_factory=list)
