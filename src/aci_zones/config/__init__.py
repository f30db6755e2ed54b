"""YAML configuration loading and convenience apply API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

from pydantic import SecretStr

from aci_zones.config.loader import ConfigError, load_config
from aci_zones.config.schema import Config, ProviderConfig, ZoneSpec
from aci_zones.core.provider import ApicProvider, PasswordAuth
from aci_zones.core.store import ZoneStore
from aci_zones.engine.errors import ApplyError, ZoneError
from aci_zones.engine.lifecycle import ZoneLifecycleManager
from aci_zones.resources.zone import Link, ZoneLinks, ZoneRequest

if TYPE_CHECKING:
    from pathlib import Path

    from aci_zones.resources.zone import Zone

__all__ = [
    "Config",
    "ConfigError",
    "ProgressCallback",
    "ProviderConfig",
    "ZoneSpec",
    "apply",
    "load",
    "load_config",
    "manager_from_config",
]

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ZoneSpec, Literal["start", "done"]], None]


def load(path: Path | str) -> Config:
    """Load a YAML configuration file."""
    return load_config(path)


def _provider_from_config(config: Config) -> ApicProvider:
    if not config.provider.host:
        raise ConfigError("provider.host is required (set in YAML or APIC_HOST env var)")
    if not config.provider.username:
        raise ConfigError("provider.username is required (set in YAML or APIC_USERNAME env var)")
    if not config.provider.password:
        raise ConfigError("provider.password is required (set APIC_PASSWORD env var)")
    auth = PasswordAuth(
        username=config.provider.username, password=SecretStr(config.provider.password)
    )
    return ApicProvider(
        host=config.provider.host,
        auth=auth,
        verify_ssl=config.provider.verify_ssl,
        timeout=config.provider.timeout,
    )


def manager_from_config(
    config: Config, *, provider: ApicProvider | None = None
) -> ZoneLifecycleManager:
    """Build a lifecycle manager over a fresh store holding the declared fabrics."""
    provider = provider if provider is not None else _provider_from_config(config)
    return ZoneLifecycleManager(store=ZoneStore(config.fabrics), controller=provider.client)


def _request_for(spec: ZoneSpec, uris_by_name: dict[str, str]) -> ZoneRequest:
    links = None
    if spec.parent is not None:
        links = ZoneLinks(contained_by_zones=[Link(oid=uris_by_name[spec.parent])])
    return ZoneRequest(
        zone_type=spec.type.value,
        name=spec.name,
        description=spec.description,
        links=links,
    )


def apply(
    config: Config,
    *,
    manager: ZoneLifecycleManager | None = None,
    progress: ProgressCallback | None = None,
) -> list[Zone]:
    """Create every declared zone in declaration order.

    Raises:
        ApplyError: On the first failing zone. Carries the zones created so
            far; their controller objects are left in place.
    """
    manager = manager if manager is not None else manager_from_config(config)
    created: list[Zone] = []
    uris_by_name: dict[str, str] = {}
    for spec in config.zones:
        if progress is not None:
            progress(spec, "start")
        try:
            zone = manager.create_zone(spec.fabric, _request_for(spec, uris_by_name))
        except ZoneError as exc:
            logger.error("Apply stopped at zone %s: %s", spec.name, exc)
            raise ApplyError(created=created, zone_name=spec.name, message=str(exc)) from exc
        uris_by_name[spec.name] = zone.resource_uri
        created.append(zone)
        if progress is not None:
            progress(spec, "done")
    logger.info("Applied %d zones", len(created))
    return created
