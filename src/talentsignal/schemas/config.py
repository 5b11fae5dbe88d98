"\"\"\"Pydantic configuration schema for CLI YAML input.\"\"\""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CoreConfig(BaseModel):
    aggregator: dict[str, Any] | None = None
    composer: dict[str, Any] | None = None
    availability: dict[str, Any] | None = None
    interpreter: dict[str, Any] | None = None
    ranking: dict[str, Any] | None = None
    snapshot: dict[str, Any] | None = None
    monitor: dict[str, Any] | None = None


class RulesConfig(BaseModel):
    badges: dict[str, Any] | None = None
    risks: dict[str, Any] | None = None


class AdapterConfig(BaseModel):
    rate_limits: dict[str, dict[str, Any]] | None = None
    transport: dict[str, Any] | None = None


class AppConfig(BaseModel):
    core: CoreConfig = Field(default_factory=CoreConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    adapters: AdapterConfig = Field(default_factory=AdapterConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for section in ("core", "rules", "adapters"):
            dumped = getattr(self, section).model_dump(exclude_none=True)
            if dumped:
                settings[section] = dumped
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValueError("Config must be a mapping")
    return AppConfig.model_validate(raw)
