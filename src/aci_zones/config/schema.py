"""Configuration models for YAML-declared zone hierarchies."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from aci_zones.resources.zone import ZoneType  # noqa: TC001 (needed at runtime by pydantic)


class ProviderConfig(BaseSettings):
    """APIC connection settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``APIC_`` prefix.  Constructor kwargs take precedence.

    ``password`` is typically provided via the ``APIC_PASSWORD`` environment
    variable rather than YAML to avoid committing secrets to version control.
    """

    model_config = SettingsConfigDict(env_prefix="APIC_")

    host: str | None = None
    username: str | None = None
    password: str | None = None
    verify_ssl: bool = True
    timeout: float = 30.0


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


class ZoneSpec(BaseModel):
    """A zone declared in the configuration.

    ``parent`` names another declared zone, not a URI; URIs are only known
    once the parent has been created.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    type: ZoneType
    fabric: str = Field(min_length=1)
    description: str = ""
    parent: str | None = None


class Config(BaseModel):
    """Zone provisioning configuration, validated straight from YAML."""

    provider: ProviderConfig
    fabrics: Annotated[list[str], BeforeValidator(_none_to_list)] = []
    zones: Annotated[list[ZoneSpec], BeforeValidator(_none_to_list)] = []
    config_dir: Path = Path()
