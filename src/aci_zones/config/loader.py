"""YAML configuration file loader."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor

from aci_zones.config.schema import Config, ZoneSpec
from aci_zones.resources.zone import ZoneType

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""


# Field name → environment variable.
_PROVIDER_ENV_MAP: dict[str, str] = {
    "host": "APIC_HOST",
    "username": "APIC_USERNAME",
    "password": "APIC_PASSWORD",
    "verify_ssl": "APIC_VERIFY_SSL",
    "timeout": "APIC_TIMEOUT",
}

_PROVIDER_BOOL_FIELDS: frozenset[str] = frozenset({"verify_ssl"})

# Zone type → the only parent type it may declare.
_PARENT_TYPE: dict[ZoneType, ZoneType] = {
    ZoneType.ZONE_OF_ZONES: ZoneType.DEFAULT,
    ZoneType.ZONE_OF_ENDPOINTS: ZoneType.ZONE_OF_ZONES,
}


def _parse_bool(env_key: str, value: str) -> bool:
    parsed = SafeConstructor.bool_values.get(value.strip().lower())
    if parsed is None:
        raise ConfigError(f"Invalid boolean for {env_key}: {value!r}")
    return parsed


def _resolve_provider(raw_provider: dict[str, Any], config_dir: Path) -> dict[str, Any]:
    """Fill unset provider fields from the environment, then from ``.env``.

    A value written in the YAML always wins. The ``.env`` file is looked up
    next to the configuration file.
    """
    env_file = config_dir / ".env"
    sources: list[Mapping[str, str | None]] = [os.environ]
    if env_file.is_file():
        logger.debug("Reading provider defaults from %s", env_file)
        sources.append(dotenv_values(env_file, encoding="utf-8-sig"))

    resolved = {k: v for k, v in raw_provider.items() if v is not None}
    for field, env_key in _PROVIDER_ENV_MAP.items():
        if field in resolved:
            continue
        value = next((s[env_key] for s in sources if s.get(env_key) is not None), None)
        if value is None:
            continue
        resolved[field] = _parse_bool(env_key, value) if field in _PROVIDER_BOOL_FIELDS else value
    return resolved


def validate_hierarchy(fabrics: list[str], zones: list[ZoneSpec]) -> list[str]:
    """Check declared zones form a valid three-level hierarchy.

    Parents must be declared before their children, since zones are created
    in declaration order.
    """
    errors: list[str] = []
    known_fabrics = set(fabrics)
    seen: dict[str, ZoneSpec] = {}
    for z in zones:
        if z.name in seen:
            errors.append(f"Duplicate zone name '{z.name}'")
            continue
        if z.fabric not in known_fabrics:
            errors.append(f"Zone '{z.name}' references undeclared fabric '{z.fabric}'")

        expected = _PARENT_TYPE.get(z.type)
        if expected is None:
            if z.parent is not None:
                errors.append(f"Default zone '{z.name}' cannot declare a parent")
        elif z.parent is None:
            errors.append(f"{z.type.value} zone '{z.name}' requires a {expected.value} parent")
        else:
            parent = seen.get(z.parent)
            if parent is None:
                errors.append(
                    f"Zone '{z.name}' references parent '{z.parent}' "
                    "which is not declared before it"
                )
            elif parent.type != expected:
                errors.append(
                    f"Zone '{z.name}' parent '{z.parent}' is a {parent.type.value} zone, "
                    f"expected {expected.value}"
                )
            elif parent.fabric != z.fabric:
                errors.append(
                    f"Zone '{z.name}' and its parent '{z.parent}' belong to different fabrics"
                )
        seen[z.name] = z
    return errors


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = YAML(typ="safe").load(path)
    except Exception as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return raw


def load_config(path: Path | str) -> Config:
    """Parse and validate a zone declaration file.

    Raises:
        ConfigError: Unreadable YAML, schema violations, or an invalid zone
            hierarchy. Hierarchy problems are reported all at once, one per
            line.
    """
    path = Path(path)
    raw = _read_yaml(path)
    provider = raw.get("provider") or {}
    if not isinstance(provider, dict):
        raise ConfigError(f"{path}: provider must be a mapping")
    raw["provider"] = _resolve_provider(provider, path.parent)
    try:
        config = Config.model_validate({**raw, "config_dir": path.parent})
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    problems = validate_hierarchy(config.fabrics, config.zones)
    if problems:
        raise ConfigError("\n".join(problems))

    logger.info(
        "Loaded %d zones across %d fabrics from %s", len(config.zones), len(config.fabrics), path
    )
    return config
