"""Zone resource definitions."""

from aci_zones.resources.zone import (
    Link,
    Zone,
    ZoneCollection,
    ZoneLinks,
    ZoneRequest,
    ZoneStatus,
    ZoneType,
    zones_collection_uri,
)

__all__ = [
    "Link",
    "Zone",
    "ZoneCollection",
    "ZoneLinks",
    "ZoneRequest",
    "ZoneStatus",
    "ZoneType",
    "zones_collection_uri",
]
