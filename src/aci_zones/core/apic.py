"""APIC REST client implementing the fabric controller protocol."""

from __future__ import annotations

import logging
from typing import Any

import requests

from aci_zones.core.controller import ApicObject, ContainerNotFoundError, ControllerError

logger = logging.getLogger(__name__)

TENANT_CLASS = "fvTenant"
APPLICATION_PROFILE_CLASS = "fvAp"
VRF_CLASS = "fvCtx"
BRIDGE_DOMAIN_CLASS = "fvBD"

# Relative name prefix of each class under its tenant.
_RN_PREFIX: dict[str, str] = {
    APPLICATION_PROFILE_CLASS: "ap-",
    VRF_CLASS: "ctx-",
    BRIDGE_DOMAIN_CLASS: "BD-",
}


# Status codes APIC answers with once the session token has expired.
_AUTH_EXPIRED = frozenset({401, 403})


class _SessionExpiredError(ControllerError):
    """APIC rejected the session token."""


def tenant_dn(tenant: str) -> str:
    return f"uni/tn-{tenant}"


def _error_text(resp: requests.Response) -> str:
    """Extract the APIC error text from a failed response."""
    try:
        payload = resp.json()
        return payload["imdata"][0]["error"]["attributes"]["text"]
    except (ValueError, KeyError, IndexError, TypeError):
        return f"HTTP {resp.status_code}: {resp.text}"


def _to_object(entry: dict[str, Any]) -> ApicObject:
    attrs = entry.get("attributes", {})
    return ApicObject(
        name=attrs.get("name", ""),
        dn=attrs.get("dn", ""),
        description=attrs.get("descr", ""),
    )


class ApicClient:
    """Thin APIC REST client.

    Logs in lazily with ``aaaLogin`` and keeps the ``APIC-cookie`` on a
    ``requests.Session``. Creation posts use ``status: created`` so the
    controller itself rejects duplicates.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        *,
        verify_ssl: bool = True,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = host.rstrip("/")
        self._username = username
        self._password = password
        self._verify_ssl = verify_ssl
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._logged_in = False

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        logger.debug("APIC %s %s", method, path)
        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self._timeout,
                verify=self._verify_ssl,
            )
        except requests.RequestException as exc:
            raise ControllerError(f"APIC request {method} {path} failed: {exc}") from exc
        if resp.status_code in _AUTH_EXPIRED:
            raise _SessionExpiredError(_error_text(resp))
        if not resp.ok:
            raise ControllerError(_error_text(resp))
        if not resp.content:
            return {}
        return resp.json()

    def login(self) -> None:
        """Authenticate and store the session token cookie."""
        payload = {"aaaUser": {"attributes": {"name": self._username, "pwd": self._password}}}
        data = self._send("POST", "/api/aaaLogin.json", json=payload)
        try:
            token = data["imdata"][0]["aaaLogin"]["attributes"]["token"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ControllerError("APIC login response carried no token") from exc
        self._session.cookies.set("APIC-cookie", token)
        self._logged_in = True
        logger.debug("Logged in to APIC %s as %s", self._base_url, self._username)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not self._logged_in:
            self.login()
        try:
            return self._send(method, path, params=params, json=json)
        except _SessionExpiredError:
            logger.debug("APIC session expired, logging in again")
            self._logged_in = False
            self.login()
        return self._send(method, path, params=params, json=json)

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Generic managed-object helpers
    # ------------------------------------------------------------------

    def _list_children(self, tenant: str, aci_class: str) -> list[ApicObject]:
        """List objects of *aci_class* under a tenant.

        The tenant itself is requested alongside, so its absence can be told
        apart from an empty listing.
        """
        data = self._request(
            "GET",
            f"/api/node/mo/{tenant_dn(tenant)}.json",
            params={
                "query-target": "subtree",
                "target-subtree-class": f"{TENANT_CLASS},{aci_class}",
            },
        )
        imdata = data.get("imdata", [])
        if not any(TENANT_CLASS in item for item in imdata):
            raise ContainerNotFoundError(f"Tenant {tenant} does not exist")
        return [_to_object(item[aci_class]) for item in imdata if aci_class in item]

    def _create(self, aci_class: str, dn: str, name: str, description: str) -> ApicObject:
        body = {
            aci_class: {
                "attributes": {
                    "dn": dn,
                    "name": name,
                    "descr": description,
                    "status": "created",
                }
            }
        }
        self._request("POST", f"/api/node/mo/{dn}.json", json=body)
        logger.debug("Created %s %s", aci_class, dn)
        return ApicObject(name=name, dn=dn, description=description)

    def _create_child(
        self, aci_class: str, name: str, tenant: str, description: str
    ) -> ApicObject:
        dn = f"{tenant_dn(tenant)}/{_RN_PREFIX[aci_class]}{name}"
        return self._create(aci_class, dn, name, description)

    # ------------------------------------------------------------------
    # FabricController
    # ------------------------------------------------------------------

    def list_tenants(self) -> list[ApicObject]:
        data = self._request("GET", f"/api/node/class/{TENANT_CLASS}.json")
        return [
            _to_object(item[TENANT_CLASS])
            for item in data.get("imdata", [])
            if TENANT_CLASS in item
        ]

    def create_tenant(self, name: str, description: str = "") -> ApicObject:
        return self._create(TENANT_CLASS, tenant_dn(name), name, description)

    def delete_tenant(self, name: str) -> None:
        self._request("DELETE", f"/api/node/mo/{tenant_dn(name)}.json")
        logger.debug("Deleted tenant %s", name)

    def list_application_profiles(self, tenant: str) -> list[ApicObject]:
        return self._list_children(tenant, APPLICATION_PROFILE_CLASS)

    def create_application_profile(
        self, name: str, tenant: str, description: str = ""
    ) -> ApicObject:
        return self._create_child(APPLICATION_PROFILE_CLASS, name, tenant, description)

    def list_vrfs(self, tenant: str) -> list[ApicObject]:
        return self._list_children(tenant, VRF_CLASS)

    def create_vrf(self, name: str, tenant: str, description: str = "") -> ApicObject:
        return self._create_child(VRF_CLASS, name, tenant, description)

    def list_bridge_domains(self, tenant: str) -> list[ApicObject]:
        return self._list_children(tenant, BRIDGE_DOMAIN_CLASS)

    def create_bridge_domain(self, name: str, tenant: str, description: str = "") -> ApicObject:
        return self._create_child(BRIDGE_DOMAIN_CLASS, name, tenant, description)
