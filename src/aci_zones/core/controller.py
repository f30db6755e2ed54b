"""Fabric controller protocol shared by the lifecycle manager and adapters."""

from typing import Protocol

from pydantic import BaseModel


class ControllerError(Exception):
    """A fabric controller call failed. The message is the controller's own."""


class ContainerNotFoundError(ControllerError):
    """The tenant a listing call is scoped to does not exist.

    Creation pre-checks treat this as an empty catalog.
    """


class ApicObject(BaseModel):
    """A named managed object returned by a listing call."""

    name: str
    dn: str = ""
    description: str = ""


class FabricController(Protocol):
    """Operations the zone lifecycle needs from the fabric controller.

    Every listing call scoped to a tenant raises :class:`ContainerNotFoundError`
    when the tenant is missing, and :class:`ControllerError` for anything else.
    """

    def list_tenants(self) -> list[ApicObject]: ...

    def create_tenant(self, name: str, description: str = "") -> ApicObject: ...

    def delete_tenant(self, name: str) -> None: ...

    def list_application_profiles(self, tenant: str) -> list[ApicObject]: ...

    def create_application_profile(
        self, name: str, tenant: str, description: str = ""
    ) -> ApicObject: ...

    def list_vrfs(self, tenant: str) -> list[ApicObject]: ...

    def create_vrf(self, name: str, tenant: str, description: str = "") -> ApicObject: ...

    def list_bridge_domains(self, tenant: str) -> list[ApicObject]: ...

    def create_bridge_domain(self, name: str, tenant: str, description: str = "") -> ApicObject: ...
