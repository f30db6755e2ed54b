"""Zone lifecycle engine."""

from aci_zones.engine.errors import (
    ApplyError,
    ExternalAdapterError,
    MalformedRequestError,
    UnsupportedOperationError,
    UnsupportedZoneTypeError,
    ZoneConflictError,
    ZoneError,
    ZoneNotFoundError,
    ZonePreconditionError,
    ZoneValidationError,
)
from aci_zones.engine.lifecycle import ZoneLifecycleManager
from aci_zones.engine.links import LinkMaintainer

__all__ = [
    "ApplyError",
    "ExternalAdapterError",
    "LinkMaintainer",
    "MalformedRequestError",
    "UnsupportedOperationError",
    "UnsupportedZoneTypeError",
    "ZoneConflictError",
    "ZoneError",
    "ZoneLifecycleManager",
    "ZoneNotFoundError",
    "ZonePreconditionError",
    "ZoneValidationError",
]
