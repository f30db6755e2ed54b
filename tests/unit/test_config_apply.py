"""Tests for applying a declared zone hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from aci_zones.config import ConfigError, apply, manager_from_config
from aci_zones.core.controller import ControllerError
from aci_zones.core.provider import ApicProvider
from aci_zones.engine.errors import ApplyError, ExternalAdapterError
from aci_zones.resources.zone import ZoneType
from tests.unit.conftest import FakeController

if TYPE_CHECKING:
    from collections.abc import Callable

    from aci_zones.config.schema import Config
    from aci_zones.engine.lifecycle import ZoneLifecycleManager

_HIERARCHY = """\
provider: {}
fabrics: [F1]
zones:
  - {name: T1, type: Default, fabric: F1, description: tenant}
  - {name: Z1, type: ZoneOfZones, fabric: F1, parent: T1}
  - {name: E1, type: ZoneOfEndpoints, fabric: F1, parent: Z1}
"""


class TestApply:
    def test_creates_in_order(
        self,
        make_config: Callable[..., Config],
        manager: ZoneLifecycleManager,
        controller: FakeController,
    ) -> None:
        created = apply(make_config(_HIERARCHY), manager=manager)

        assert [(z.name, z.zone_type) for z in created] == [
            ("T1", ZoneType.DEFAULT),
            ("Z1", ZoneType.ZONE_OF_ZONES),
            ("E1", ZoneType.ZONE_OF_ENDPOINTS),
        ]
        assert controller.tenants == {"T1": {"ap": {"Z1"}, "vrf": {"Z1-VRF"}, "bd": {"E1"}}}

        parent = manager.get_zone("F1", created[0].resource_uri)
        assert parent.links.child_uris() == [created[1].resource_uri]
        assert created[1].links.parent_uris() == [created[0].resource_uri]
        assert created[2].links.parent_uris() == [created[1].resource_uri]

    def test_progress_events(
        self, make_config: Callable[..., Config], manager: ZoneLifecycleManager
    ) -> None:
        events: list[tuple[str, str]] = []

        apply(
            make_config(_HIERARCHY),
            manager=manager,
            progress=lambda spec, event: events.append((spec.name, event)),
        )

        assert events == [
            ("T1", "start"),
            ("T1", "done"),
            ("Z1", "start"),
            ("Z1", "done"),
            ("E1", "start"),
            ("E1", "done"),
        ]

    def test_failure_carries_partial_result(
        self,
        make_config: Callable[..., Config],
        manager: ZoneLifecycleManager,
        controller: FakeController,
    ) -> None:
        controller.fail_on["create_vrf"] = ControllerError("VRF quota exceeded")

        with pytest.raises(ApplyError) as excinfo:
            apply(make_config(_HIERARCHY), manager=manager)

        err = excinfo.value
        assert err.zone_name == "Z1"
        assert [z.name for z in err.created] == ["T1"]
        assert isinstance(err.__cause__, ExternalAdapterError)
        assert err.__cause__.partial == ["ApplicationProfile T1/Z1"]
        assert "VRF quota exceeded" in str(err)

    def test_empty_config(
        self, make_config: Callable[..., Config], manager: ZoneLifecycleManager
    ) -> None:
        assert apply(make_config("provider: {}\nfabrics: [F1]\n"), manager=manager) == []


class TestManagerFromConfig:
    def test_registers_declared_fabrics(self, make_config: Callable[..., Config]) -> None:
        cfg = make_config("provider: {}\nfabrics: [F1, F2]\n")

        manager = manager_from_config(cfg, provider=ApicProvider.from_client(FakeController()))

        assert manager.store.has_fabric("F1")
        assert manager.store.has_fabric("F2")
        assert not manager.store.has_fabric("F3")

    @pytest.mark.parametrize(
        ("provider_yaml", "missing"),
        [
            ("{}", "provider.host"),
            ("{host: https://apic}", "provider.username"),
            ("{host: https://apic, username: admin}", "provider.password"),
        ],
    )
    def test_requires_credentials(
        self, make_config: Callable[..., Config], provider_yaml: str, missing: str
    ) -> None:
        cfg = make_config(f"provider: {provider_yaml}\n")

        with pytest.raises(ConfigError, match=missing):
            manager_from_config(cfg)
