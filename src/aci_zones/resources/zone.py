"""Zone resource models (Redfish ``Zone`` schema subset)."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

ZONE_ODATA_CONTEXT = "/ODIM/v1/$metadata#Zone.Zone"
ZONE_ODATA_TYPE = "#Zone.v1_4_0.Zone"
ZONE_COLLECTION_ODATA_CONTEXT = "/ODIM/v1/$metadata#ZoneCollection.ZoneCollection"
ZONE_COLLECTION_ODATA_TYPE = "#ZoneCollection.ZoneCollection"


def zones_collection_uri(fabric_id: str) -> str:
    """Return the zone collection URI for a fabric."""
    return f"/ODIM/v1/Fabrics/{fabric_id}/Zones"


class ZoneType(str, Enum):
    """Zone variants and the APIC objects they map to.

    - ``Default``: a tenant.
    - ``ZoneOfZones``: an application profile plus a VRF under the parent tenant.
    - ``ZoneOfEndpoints``: a bridge domain under the grandparent tenant.
    """

    DEFAULT = "Default"
    ZONE_OF_ZONES = "ZoneOfZones"
    ZONE_OF_ENDPOINTS = "ZoneOfEndpoints"


class _RedfishModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        """Dump with Redfish property names, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Link(_RedfishModel):
    oid: str = Field(alias="@odata.id")


class ZoneStatus(_RedfishModel):
    state: str = Field(default="Enabled", alias="State")
    health: str = Field(default="OK", alias="Health")


class ZoneLinks(_RedfishModel):
    """Containment links of a zone.

    ``contains_zones_count`` must always equal ``len(contains_zones)``; only
    :class:`aci_zones.engine.links.LinkMaintainer` mutates the child side.
    """

    contained_by_zones: list[Link] | None = Field(default=None, alias="ContainedByZones")
    contained_by_zones_count: int = Field(default=0, alias="ContainedByZones@odata.count")
    contains_zones: list[Link] = Field(default_factory=list, alias="ContainsZones")
    contains_zones_count: int = Field(default=0, alias="ContainsZones@odata.count")

    def parent_uris(self) -> list[str]:
        return [link.oid for link in self.contained_by_zones or []]

    def child_uris(self) -> list[str]:
        return [link.oid for link in self.contains_zones]


class Zone(_RedfishModel):
    """A stored zone record."""

    odata_context: str = Field(default=ZONE_ODATA_CONTEXT, alias="@odata.context")
    odata_type: str = Field(default=ZONE_ODATA_TYPE, alias="@odata.type")
    resource_uri: str = Field(alias="@odata.id")
    id: str = Field(alias="Id")
    name: str = Field(alias="Name")
    description: str = Field(default="", alias="Description")
    zone_type: ZoneType = Field(alias="ZoneType")
    status: ZoneStatus = Field(default_factory=ZoneStatus, alias="Status")
    links: ZoneLinks = Field(default_factory=ZoneLinks, alias="Links")

    @property
    def contains_zones_count(self) -> int:
        return self.links.contains_zones_count


class ZoneRequest(_RedfishModel):
    """Body of a zone creation request.

    ``zone_type`` stays a plain string here so that an unknown value can be
    answered with "Not Implemented" rather than a decoding error.
    """

    zone_type: str | None = Field(default=None, alias="ZoneType")
    name: str | None = Field(default=None, alias="Name")
    description: str = Field(default="", alias="Description")
    links: ZoneLinks | None = Field(default=None, alias="Links")


class ZoneCollection(_RedfishModel):
    odata_context: str = Field(default=ZONE_COLLECTION_ODATA_CONTEXT, alias="@odata.context")
    odata_id: str = Field(alias="@odata.id")
    odata_type: str = Field(default=ZONE_COLLECTION_ODATA_TYPE, alias="@odata.type")
    description: str = Field(default="ZoneCollection view", alias="Description")
    name: str = Field(default="Zones", alias="Name")
    members: list[Link] = Field(default_factory=list, alias="Members")
    members_count: int = Field(default=0, alias="Members@odata.count")
