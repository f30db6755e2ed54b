"""Zone lifecycle: creation dispatch, cascading delete and reads."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, assert_never
from uuid import uuid4

from aci_zones.core.controller import ApicObject, ContainerNotFoundError, ControllerError
from aci_zones.core.store import ZoneRecord
from aci_zones.engine.errors import (
    ExternalAdapterError,
    UnsupportedOperationError,
    UnsupportedZoneTypeError,
    ZoneConflictError,
    ZoneNotFoundError,
    ZonePreconditionError,
    ZoneValidationError,
)
from aci_zones.engine.links import LinkMaintainer
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

if TYPE_CHECKING:
    from aci_zones.core.controller import FabricController
    from aci_zones.core.store import ZoneStore

logger = logging.getLogger(__name__)

VRF_SUFFIX = "-VRF"


class ZoneLifecycleManager:
    """Creates, deletes and reads zones for fabrics known to the store.

    Each zone type maps to controller objects:

    - ``Default`` → tenant named after the zone.
    - ``ZoneOfZones`` → application profile ``<name>`` and VRF ``<name>-VRF``
      in the parent Default zone's tenant; attached to the parent.
    - ``ZoneOfEndpoints`` → bridge domain ``<name>`` in the tenant reached
      through its ZoneOfZones parent; not attached to the parent.

    Name collisions are probed on the controller before anything is created.
    The probe is best-effort; a conflict the controller reports on the create
    call surfaces as :class:`ExternalAdapterError`. Objects created before a
    later step fails are left on the controller and reported, not rolled back.
    """

    def __init__(self, *, store: ZoneStore, controller: FabricController) -> None:
        self._store = store
        self._controller = controller
        self._links = LinkMaintainer(store)

    @property
    def store(self) -> ZoneStore:
        return self._store

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def require_fabric(self, fabric_id: str) -> None:
        """Raise :class:`ZoneNotFoundError` unless the fabric is known."""
        if not self._store.has_fabric(fabric_id):
            uri = zones_collection_uri(fabric_id)
            logger.error("Fabric data for uri %s not found", uri)
            raise ZoneNotFoundError(
                f"Fabric data for uri {uri} not found", message_args=["Fabric", fabric_id]
            )

    def _require_zone(self, fabric_id: str, uri: str) -> ZoneRecord:
        record = self._store.get(uri)
        if record is None or record.fabric_id != fabric_id:
            logger.error("Zone data for uri %s not found", uri)
            raise ZoneNotFoundError(
                f"Zone data for uri {uri} not found", message_args=["Zone", uri]
            )
        return record

    def _resolve_parent(self, fabric_id: str, uri: str, expected: ZoneType) -> ZoneRecord:
        """Load a parent zone, which must be of *expected* type and in the same fabric."""
        record = self._store.get(uri)
        if record is None or record.fabric_id != fabric_id or record.zone.zone_type != expected:
            logger.error("%s zone data for uri %s not found", expected.value, uri)
            raise ZoneNotFoundError(
                f"{expected.value} zone data for uri {uri} not found",
                message_args=[expected.value, uri],
            )
        return record

    def get_zone(self, fabric_id: str, uri: str) -> Zone:
        self.require_fabric(fabric_id)
        return self._require_zone(fabric_id, uri).zone

    def get_zones(self, fabric_id: str) -> ZoneCollection:
        """List references to every zone of a fabric."""
        self.require_fabric(fabric_id)
        members = [Link(oid=r.zone.resource_uri) for r in self._store.list_by_fabric(fabric_id)]
        return ZoneCollection(
            odata_id=zones_collection_uri(fabric_id),
            members=members,
            members_count=len(members),
        )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_request(request: ZoneRequest) -> ZoneType:
        if not request.zone_type:
            raise ZoneValidationError(
                "ZoneType attribute is missing in the request", message_args=["ZoneType"]
            )
        try:
            zone_type = ZoneType(request.zone_type)
        except ValueError:
            raise UnsupportedZoneTypeError(request.zone_type) from None
        if not request.name:
            raise ZoneValidationError(
                "Name attribute is missing in the request", message_args=["Name"]
            )
        return zone_type

    @staticmethod
    def _single_parent(request: ZoneRequest) -> str:
        """Return the one ``ContainedByZones`` URI of the request."""
        if request.links is None:
            raise ZoneValidationError(
                "Links attribute is missing in the request", message_args=["Links"]
            )
        parents = request.links.parent_uris()
        if not parents:
            raise ZoneValidationError(
                "Zone cannot be created as there are dependent resources missing",
                message_args=["ContainedByZones"],
            )
        if len(parents) > 1:
            raise ZoneValidationError(
                f"ContainedByZones must reference exactly one zone, got {len(parents)}",
                message_args=["ContainedByZones"],
            )
        return parents[0]

    def _new_zone(
        self,
        fabric_id: str,
        request: ZoneRequest,
        zone_type: ZoneType,
        parent_uri: str | None = None,
    ) -> Zone:
        collection = zones_collection_uri(fabric_id)
        zone_id = str(uuid4())
        while f"{collection}/{zone_id}" in self._store:
            zone_id = str(uuid4())
        links = ZoneLinks()
        if parent_uri is not None:
            links.contained_by_zones = [Link(oid=parent_uri)]
            links.contained_by_zones_count = 1
        return Zone(
            resource_uri=f"{collection}/{zone_id}",
            id=zone_id,
            name=request.name or "",
            description=request.description,
            zone_type=zone_type,
            status=ZoneStatus(state="Enabled", health="OK"),
            links=links,
        )

    def _persist(self, fabric_id: str, zone: Zone) -> Zone:
        self._store.put(zone.resource_uri, ZoneRecord(fabric_id=fabric_id, zone=zone))
        logger.info("Created %s zone %s at %s", zone.zone_type.value, zone.name, zone.resource_uri)
        return zone

    @staticmethod
    def _probe(
        kind: str,
        list_fn: Callable[[str], list[ApicObject]],
        tenant: str,
        name: str,
    ) -> None:
        """Fail with a conflict if *name* already exists under *tenant*.

        A missing tenant means nothing can collide.
        """
        try:
            existing = list_fn(tenant)
        except ContainerNotFoundError:
            logger.debug("Tenant %s not found while listing %ss", tenant, kind)
            return
        except ControllerError as exc:
            msg = f"Zone cannot be created, error while retrieving existing {kind}s: {exc}"
            logger.error(msg)
            raise ExternalAdapterError(msg, message_args=[kind, tenant]) from exc
        for obj in existing:
            if obj.name == name:
                raise ZoneConflictError(
                    f"{kind} already exists with name: {name}",
                    message_args=[kind, obj.name, name],
                )

    def create_zone(self, fabric_id: str, request: ZoneRequest) -> Zone:
        """Provision and store a zone.

        Returns the stored record; its ``resource_uri`` is the location of the
        new resource.

        Raises:
            ZoneNotFoundError: Unknown fabric or parent zone.
            ZoneValidationError: Missing property or bad ``ContainedByZones``.
            ZoneConflictError: Name already taken on the controller.
            ExternalAdapterError: Controller failure, possibly after partial creation.
            UnsupportedZoneTypeError: Unknown ``ZoneType``.
        """
        self.require_fabric(fabric_id)
        zone_type = self._parse_request(request)
        with self._store.fabric_lock(fabric_id):
            match zone_type:
                case ZoneType.DEFAULT:
                    return self._create_default_zone(fabric_id, request)
                case ZoneType.ZONE_OF_ZONES:
                    return self._create_zone_of_zones(fabric_id, request)
                case ZoneType.ZONE_OF_ENDPOINTS:
                    return self._create_zone_of_endpoints(fabric_id, request)
                case _:
                    assert_never(zone_type)

    def _create_default_zone(self, fabric_id: str, request: ZoneRequest) -> Zone:
        name = request.name or ""
        try:
            tenants = self._controller.list_tenants()
        except ControllerError as exc:
            raise ExternalAdapterError(
                f"Error while creating default Zone: {exc}", message_args=["DefaultZone", name]
            ) from exc
        for tenant in tenants:
            if tenant.name == name:
                raise ZoneConflictError(
                    f"Default zone already exists with name: {name}",
                    message_args=["DefaultZone", tenant.name, name],
                )

        try:
            self._controller.create_tenant(name, request.description)
        except ControllerError as exc:
            raise ExternalAdapterError(
                f"Error while creating default Zone: {exc}", message_args=["DefaultZone", name]
            ) from exc

        existing = self._store.find_by_name(name)
        if existing is not None:
            logger.warning(
                "Zone named %s already stored at %s; not storing a second record",
                name,
                existing.zone.resource_uri,
            )
            return existing.zone
        return self._persist(fabric_id, self._new_zone(fabric_id, request, ZoneType.DEFAULT))

    def _create_zone_of_zones(self, fabric_id: str, request: ZoneRequest) -> Zone:
        name = request.name or ""
        parent_uri = self._single_parent(request)
        default_zone = self._resolve_parent(fabric_id, parent_uri, ZoneType.DEFAULT).zone
        tenant = default_zone.name
        vrf_name = f"{name}{VRF_SUFFIX}"

        self._probe("ApplicationProfile", self._controller.list_application_profiles, tenant, name)
        self._probe("VRF", self._controller.list_vrfs, tenant, vrf_name)

        try:
            self._controller.create_application_profile(name, tenant, request.description)
        except ControllerError as exc:
            raise ExternalAdapterError(
                f"Error while creating application profile: {exc}",
                message_args=["ApplicationProfile", name],
            ) from exc
        try:
            self._controller.create_vrf(vrf_name, tenant, request.description)
        except ControllerError as exc:
            logger.error(
                "VRF %s failed after application profile %s was created in tenant %s",
                vrf_name,
                name,
                tenant,
            )
            raise ExternalAdapterError(
                f"Error while creating VRF {vrf_name}: {exc}; "
                f"application profile {name} was left in tenant {tenant}",
                message_args=["VRF", vrf_name],
                partial=[f"ApplicationProfile {tenant}/{name}"],
            ) from exc

        zone = self._persist(
            fabric_id, self._new_zone(fabric_id, request, ZoneType.ZONE_OF_ZONES, parent_uri)
        )
        self._links.attach(parent_uri, zone.resource_uri)
        return zone

    def _create_zone_of_endpoints(self, fabric_id: str, request: ZoneRequest) -> Zone:
        name = request.name or ""
        parent_uri = self._single_parent(request)
        zone_of_zones = self._resolve_parent(fabric_id, parent_uri, ZoneType.ZONE_OF_ZONES).zone
        grandparents = zone_of_zones.links.parent_uris()
        if len(grandparents) != 1:
            raise ZoneNotFoundError(
                f"ZoneOfZones {parent_uri} is not contained by exactly one Default zone",
                message_args=["ZoneOfZones", parent_uri],
            )
        tenant = self._resolve_parent(fabric_id, grandparents[0], ZoneType.DEFAULT).zone.name

        self._probe("BridgeDomain", self._controller.list_bridge_domains, tenant, name)
        try:
            self._controller.create_bridge_domain(name, tenant, request.description)
        except ControllerError as exc:
            raise ExternalAdapterError(
                f"Error while creating Zone of Endpoints: {exc}",
                message_args=["ZoneOfEndpoints", name],
            ) from exc

        # Bridge-domain zones are not added to the parent's ContainsZones.
        return self._persist(
            fabric_id, self._new_zone(fabric_id, request, ZoneType.ZONE_OF_ENDPOINTS, parent_uri)
        )

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_zone(self, fabric_id: str, uri: str) -> None:
        """Delete a zone that has no children attached.

        Raises:
            ZoneNotFoundError: Unknown fabric, zone or parent link.
            ZonePreconditionError: Children still attached.
            ExternalAdapterError: Tenant de-provisioning failed.
            UnsupportedOperationError: ZoneOfEndpoints deletion.
        """
        self.require_fabric(fabric_id)
        with self._store.fabric_lock(fabric_id):
            record = self._require_zone(fabric_id, uri)
            zone = record.zone
            if zone.contains_zones_count != 0:
                logger.error("Zone %s still contains %d zones", uri, zone.contains_zones_count)
                raise ZonePreconditionError(
                    "Zone cannot be deleted as there are dependent resources still tied to it",
                    message_args=["Zone", uri],
                )

            match zone.zone_type:
                case ZoneType.DEFAULT:
                    try:
                        self._controller.delete_tenant(zone.name)
                    except ControllerError as exc:
                        raise ExternalAdapterError(
                            f"Error while deleting Zone: {exc}",
                            message_args=["DefaultZone", zone.name],
                        ) from exc
                case ZoneType.ZONE_OF_ZONES:
                    for parent_uri in zone.links.parent_uris():
                        self._links.detach(parent_uri, uri)
                case ZoneType.ZONE_OF_ENDPOINTS:
                    raise UnsupportedOperationError(
                        "Deleting a ZoneOfEndpoints zone is not supported",
                        message_args=["ZoneOfEndpoints", uri],
                    )
                case _:
                    assert_never(zone.zone_type)

            self._store.delete(uri)
            logger.info("Deleted %s zone %s at %s", zone.zone_type.value, zone.name, uri)
