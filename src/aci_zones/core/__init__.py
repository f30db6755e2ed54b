"""Core infrastructure: controller adapters, provider and zone store."""

from aci_zones.core.apic import ApicClient
from aci_zones.core.controller import (
    ApicObject,
    ContainerNotFoundError,
    ControllerError,
    FabricController,
)
from aci_zones.core.provider import ApicProvider, PasswordAuth
from aci_zones.core.store import ZoneRecord, ZoneStore

__all__ = [
    "ApicClient",
    "ApicObject",
    "ApicProvider",
    "ContainerNotFoundError",
    "ControllerError",
    "FabricController",
    "PasswordAuth",
    "ZoneRecord",
    "ZoneStore",
]
