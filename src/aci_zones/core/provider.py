"""APIC Provider - Connection configuration for an APIC cluster."""

from functools import cached_property
from typing import Self

from pydantic import BaseModel, ConfigDict, SecretStr

from aci_zones.core.controller import FabricController


class PasswordAuth(BaseModel):
    """Username/password authentication for APIC (``aaaLogin``)."""

    username: str
    password: SecretStr


class ApicProvider(BaseModel):
    """Connection configuration for an APIC cluster.

    For real use, provide host and auth. For tests, use the `from_client`
    classmethod to inject any object implementing ``FabricController``.

    Examples:
        provider = ApicProvider(
            host="https://apic.company.com",
            auth=PasswordAuth(username="admin", password="secret"),
        )

        provider = ApicProvider.from_client(FakeController())
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    host: str | None = None
    auth: PasswordAuth | None = None
    verify_ssl: bool = True
    timeout: float = 30.0

    # Injected client (for testing)
    _injected_client: FabricController | None = None

    @classmethod
    def from_client(cls, client: FabricController) -> Self:
        """Create a provider with an injected controller client."""
        provider = cls.model_construct()
        provider._injected_client = client
        return provider

    @cached_property
    def client(self) -> FabricController:
        """Get the controller client."""
        if self._injected_client is not None:
            return self._injected_client

        if self.host is None or self.auth is None:
            raise ValueError(
                "Either provide host+auth, or use ApicProvider.from_client() to inject a client"
            )

        from aci_zones.core.apic import ApicClient

        return ApicClient(
            self.host,
            self.auth.username,
            self.auth.password.get_secret_value(),
            verify_ssl=self.verify_ssl,
            timeout=self.timeout,
        )
