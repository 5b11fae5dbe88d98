"\"\"\"Dependency injection container for the talent signal engine.\"\"\""

from __future__ import annotations

from pathlib import Path

from dependency_injector import containers, providers

from .adapters import HTTPProfileTransport, ProfileTransport, StaticProfileTransport, build_fetchers
from .core import (
    AggregatorConfig,
    AlertBroadcaster,
    AvailabilityConfig,
    AvailabilityDetector,
    ComposerConfig,
    InterpreterConfig,
    MonitorConfig,
    QueryInterpreter,
    RankingConfig,
    RankingEngine,
    RiskMonitor,
    ScoreComposer,
    SignalAggregator,
    SnapshotBuilder,
    SnapshotCache,
    SnapshotConfig,
    TenureEstimator,
)
from .core.rules import BadgeConfig, BadgeRules, RiskConfig, RiskRules
from .directory import InMemoryCandidateDirectory
from .pipeline import TalentPipeline
from .service import TalentSignalService


class TalentSignalContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    transport = providers.Singleton(StaticProfileTransport, payloads={})

    fetchers = providers.Singleton(
        build_fetchers,
        transport=transport,
        rate_limits=config.rate_limits,
    )

    aggregator = providers.Singleton(SignalAggregator, fetchers=fetchers)
    composer = providers.Singleton(ScoreComposer)
    availability = providers.Singleton(AvailabilityDetector)
    interpreter = providers.Singleton(QueryInterpreter)
    ranking = providers.Singleton(RankingEngine)

    tenure = providers.Singleton(TenureEstimator)
    badge_rules = providers.Singleton(BadgeRules)
    risk_rules = providers.Singleton(RiskRules, tenure=tenure)

    snapshot_builder = providers.Singleton(
        SnapshotBuilder,
        aggregator=aggregator,
        composer=composer,
        availability=availability,
        badges=badge_rules,
        risks=risk_rules,
    )
    snapshot_cache = providers.Singleton(SnapshotCache, builder=snapshot_builder)

    broadcaster = providers.Singleton(AlertBroadcaster)
    directory = providers.Singleton(InMemoryCandidateDirectory)

    monitor = providers.Singleton(
        RiskMonitor,
        aggregator=aggregator,
        availability=availability,
        broadcaster=broadcaster,
        directory=directory,
    )

    service = providers.Singleton(
        TalentSignalService,
        interpreter=interpreter,
        aggregator=aggregator,
        composer=composer,
        availability=availability,
        ranking=ranking,
        snapshots=snapshot_cache,
        monitor=monitor,
        broadcaster=broadcaster,
        directory=directory,
        transport=transport,
    )

    pipeline = providers.Factory(TalentPipeline, service=service)


def create_container(
    *,
    settings: dict | None = None,
    transport: ProfileTransport | None = None,
) -> TalentSignalContainer:
    """Instantiate container with optional overrides."""

    container = TalentSignalContainer()

    if transport is not None:
        container.transport.override(providers.Object(transport))

    if not settings:
        return container

    adapter_settings = settings.get("adapters", {}) if isinstance(settings, dict) else {}
    if adapter_settings.get("rate_limits"):
        container.config.override({"rate_limits": adapter_settings["rate_limits"]})

    transport_settings = adapter_settings.get("transport") or {}
    if transport is None and transport_settings.get("fixtures"):
        container.transport.override(
            providers.Singleton(StaticProfileTransport.from_path, Path(transport_settings["fixtures"]))
        )
    elif transport is None and transport_settings.get("base_url"):
        container.transport.override(
            providers.Singleton(
                HTTPProfileTransport,
                base_url=transport_settings["base_url"],
                api_token=transport_settings.get("api_token"),
                timeout_seconds=float(transport_settings.get("timeout_seconds", 10.0)),
            )
        )

    core_settings = settings.get("core", {}) if isinstance(settings, dict) else {}

    if "aggregator" in core_settings:
        aggregator_config = AggregatorConfig(**core_settings["aggregator"])
        container.aggregator.override(
            providers.Singleton(
                SignalAggregator,
                fetchers=container.fetchers,
                config=aggregator_config,
            )
        )

    if "composer" in core_settings:
        composer_config = ComposerConfig(**core_settings["composer"])
        container.composer.override(providers.Singleton(ScoreComposer, config=composer_config))

    if "availability" in core_settings:
        availability_config = AvailabilityConfig(**core_settings["availability"])
        container.availability.override(
            providers.Singleton(AvailabilityDetector, config=availability_config)
        )

    if "interpreter" in core_settings:
        interpreter_config = InterpreterConfig(**core_settings["interpreter"])
        container.interpreter.override(
            providers.Singleton(QueryInterpreter, config=interpreter_config)
        )

    if "ranking" in core_settings:
        ranking_config = RankingConfig(**core_settings["ranking"])
        container.ranking.override(providers.Singleton(RankingEngine, config=ranking_config))

    if "snapshot" in core_settings:
        snapshot_config = SnapshotConfig(**core_settings["snapshot"])
        container.snapshot_cache.override(
            providers.Singleton(
                SnapshotCache,
                builder=container.snapshot_builder,
                config=snapshot_config,
            )
        )

    if "monitor" in core_settings:
        monitor_settings = dict(core_settings["monitor"])
        if "status_fields" in monitor_settings:
            monitor_settings["status_fields"] = tuple(monitor_settings["status_fields"])
        monitor_config = MonitorConfig(**monitor_settings)
        container.monitor.override(
            providers.Singleton(
                RiskMonitor,
                aggregator=container.aggregator,
                availability=container.availability,
                broadcaster=container.broadcaster,
                directory=container.directory,
                config=monitor_config,
            )
        )

    rule_settings = settings.get("rules", {}) if isinstance(settings, dict) else {}

    if "badges" in rule_settings:
        badge_config = BadgeConfig(**rule_settings["badges"])
        container.badge_rules.override(providers.Singleton(BadgeRules, config=badge_config))

    if "risks" in rule_settings:
        risk_config = RiskConfig(**rule_settings["risks"])
        container.risk_rules.override(
            providers.Singleton(RiskRules, config=risk_config, tenure=container.tenure)
        )

    return container
