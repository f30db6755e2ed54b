"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from aci_zones.api import ZoneApi
from aci_zones.config import load
from aci_zones.core.controller import ApicObject, ContainerNotFoundError, ControllerError
from aci_zones.core.store import ZoneStore
from aci_zones.engine.lifecycle import ZoneLifecycleManager
from aci_zones.resources.zone import Link, ZoneLinks, ZoneRequest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from aci_zones.config.schema import Config

_APIC_ENV_VARS = (
    "APIC_HOST",
    "APIC_USERNAME",
    "APIC_PASSWORD",
    "APIC_VERIFY_SSL",
    "APIC_TIMEOUT",
    "ACI_ZONES_LOG",
)

FABRIC = "F1"


class FakeController:
    """In-memory stand-in for APIC that records every call.

    ``fail_on`` maps a method name to the ``ControllerError`` it should raise.
    """

    def __init__(self) -> None:
        # tenant → kind ("ap", "vrf", "bd") → object names
        self.tenants: dict[str, dict[str, set[str]]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.fail_on: dict[str, ControllerError] = {}

    def _call(self, method: str, *args: str) -> None:
        self.calls.append((method, *args))
        if method in self.fail_on:
            raise self.fail_on[method]

    def _children(self, tenant: str, kind: str) -> list[ApicObject]:
        if tenant not in self.tenants:
            raise ContainerNotFoundError(f"Tenant {tenant} does not exist")
        return [ApicObject(name=n) for n in sorted(self.tenants[tenant][kind])]

    def _add_child(self, tenant: str, kind: str, name: str, description: str) -> ApicObject:
        if tenant not in self.tenants:
            raise ControllerError(f"Tenant {tenant} does not exist")
        if name in self.tenants[tenant][kind]:
            raise ControllerError(f"{kind} {name} already exists")
        self.tenants[tenant][kind].add(name)
        return ApicObject(name=name, description=description)

    def list_tenants(self) -> list[ApicObject]:
        self._call("list_tenants")
        return [ApicObject(name=n) for n in sorted(self.tenants)]

    def create_tenant(self, name: str, description: str = "") -> ApicObject:
        self._call("create_tenant", name)
        if name in self.tenants:
            raise ControllerError(f"Tenant {name} already exists")
        self.tenants[name] = {"ap": set(), "vrf": set(), "bd": set()}
        return ApicObject(name=name, description=description)

    def delete_tenant(self, name: str) -> None:
        self._call("delete_tenant", name)
        self.tenants.pop(name, None)

    def list_application_profiles(self, tenant: str) -> list[ApicObject]:
        self._call("list_application_profiles", tenant)
        return self._children(tenant, "ap")

    def create_application_profile(
        self, name: str, tenant: str, description: str = ""
    ) -> ApicObject:
        self._call("create_application_profile", name, tenant)
        return self._add_child(tenant, "ap", name, description)

    def list_vrfs(self, tenant: str) -> list[ApicObject]:
        self._call("list_vrfs", tenant)
        return self._children(tenant, "vrf")

    def create_vrf(self, name: str, tenant: str, description: str = "") -> ApicObject:
        self._call("create_vrf", name, tenant)
        return self._add_child(tenant, "vrf", name, description)

    def list_bridge_domains(self, tenant: str) -> list[ApicObject]:
        self._call("list_bridge_domains", tenant)
        return self._children(tenant, "bd")

    def create_bridge_domain(self, name: str, tenant: str, description: str = "") -> ApicObject:
        self._call("create_bridge_domain", name, tenant)
        return self._add_child(tenant, "bd", name, description)


def zone_request(
    zone_type: str | None, name: str | None, *parents: str, description: str = ""
) -> ZoneRequest:
    links = ZoneLinks(contained_by_zones=[Link(oid=p) for p in parents]) if parents else None
    return ZoneRequest(zone_type=zone_type, name=name, description=description, links=links)


@pytest.fixture(autouse=True)
def _clean_apic_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove APIC_* env vars so unit tests don't leak host config."""
    for var in _APIC_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def controller() -> FakeController:
    return FakeController()


@pytest.fixture
def store() -> ZoneStore:
    return ZoneStore([FABRIC])


@pytest.fixture
def manager(store: ZoneStore, controller: FakeController) -> ZoneLifecycleManager:
    return ZoneLifecycleManager(store=store, controller=controller)


@pytest.fixture
def api(manager: ZoneLifecycleManager) -> ZoneApi:
    return ZoneApi(manager)


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Config:
        (tmp_path / "config.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "config.yaml")

    return _make
