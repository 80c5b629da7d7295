"""Composition root wiring adapters, sides, and the controller together."""

from dataclasses import dataclass
from typing import Any, Callable

from time_entry_sync.adapters.base import ReadCapability, WriteCapability
from time_entry_sync.config import Config
from time_entry_sync.sync.alerts import AlertChannel
from time_entry_sync.sync.controller import IntegrationController
from time_entry_sync.sync.stores import SourceSide, TargetSide
from time_entry_sync.tick import TickClient
from time_entry_sync.toggl import TogglClient

SOURCE_ADAPTERS: dict[str, Callable[[Config], ReadCapability]] = {
    "toggl": lambda config: TogglClient(tz=config.timezone),
}

TARGET_ADAPTERS: dict[str, Callable[[Config], WriteCapability]] = {
    "tick": lambda config: TickClient(),
}


@dataclass(frozen=True)
class SyncApp:
    """Everything a front end needs, wired once per session."""

    config: Config
    alerts: AlertChannel
    source: SourceSide
    target: TargetSide
    integration: IntegrationController

    async def close(self) -> None:
        """Close both adapters."""
        await self.source.adapter.close()
        await self.target.adapter.close()

    async def __aenter__(self) -> "SyncApp":
        """Context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Context manager exit."""
        await self.close()


def create_source_adapter(config: Config) -> ReadCapability:
    """Build the adapter named by the "source" setting.

    Raises:
        ValueError: If no such source adapter exists.
    """
    factory = SOURCE_ADAPTERS.get(config.source_name)
    if factory is None:
        raise ValueError(
            f"Unknown source service '{config.source_name}', "
            f"expected one of: {', '.join(SOURCE_ADAPTERS)}"
        )
    return factory(config)


def create_target_adapter(config: Config) -> WriteCapability:
    """Build the adapter named by the "target" setting.

    Raises:
        ValueError: If no such target adapter exists.
    """
    factory = TARGET_ADAPTERS.get(config.target_name)
    if factory is None:
        raise ValueError(
            f"Unknown target service '{config.target_name}', "
            f"expected one of: {', '.join(TARGET_ADAPTERS)}"
        )
    return factory(config)


def build_app(
    config: Config,
    source_adapter: ReadCapability | None = None,
    target_adapter: WriteCapability | None = None,
) -> SyncApp:
    """Wire a session.

    Args:
        config: Application configuration.
        source_adapter: Overrides the configured source adapter.
        target_adapter: Overrides the configured target adapter.
    """
    alerts = AlertChannel()
    source = SourceSide(
        source_adapter or create_source_adapter(config), config.source_name, config, alerts
    )
    target = TargetSide(
        target_adapter or create_target_adapter(config), config.target_name, config, alerts
    )
    integration = IntegrationController(config, source, target, alerts)
    return SyncApp(
        config=config,
        alerts=alerts,
        source=source,
        target=target,
        integration=integration,
    )
