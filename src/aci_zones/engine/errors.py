"""Zone lifecycle error types."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class ZoneError(Exception):
    """Base exception for zone lifecycle errors.

    ``message_args`` identifies the offending resource/name pair and ends up
    in the ``MessageArgs`` of the error envelope.
    """

    def __init__(self, message: str, *, message_args: Sequence[Any] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.message_args = list(message_args)


class ZoneValidationError(ZoneError):
    """The request is missing a required property or has a bad link cardinality."""


class MalformedRequestError(ZoneValidationError):
    """The request body could not be decoded."""


class ZoneNotFoundError(ZoneError):
    """A fabric, zone, parent zone or containment link could not be resolved."""


class ZoneConflictError(ZoneError):
    """A zone or controller object with the same name already exists."""


class ZonePreconditionError(ZoneError):
    """The zone still has children attached and cannot be deleted."""


class ExternalAdapterError(ZoneError):
    """The fabric controller rejected or failed an operation.

    ``partial`` lists the controller objects created before the failure; they
    are left in place. The controller exception is chained via ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        message_args: Sequence[Any] = (),
        partial: Sequence[str] = (),
    ) -> None:
        super().__init__(message, message_args=message_args)
        self.partial = list(partial)


class UnsupportedZoneTypeError(ZoneError):
    """The requested zone type is not one of the known variants."""

    def __init__(self, zone_type: str) -> None:
        super().__init__(f"Zone type {zone_type!r} is not supported", message_args=[zone_type])
        self.zone_type = zone_type


class UnsupportedOperationError(ZoneError):
    """The operation is not implemented for this zone type."""


class ApplyError(ZoneError):
    """Raised when a declared hierarchy fails to apply mid-way.

    Carries the zones created before the failure. The underlying exception is
    chained via ``__cause__``.
    """

    def __init__(self, *, created: list[Any], zone_name: str, message: str) -> None:
        self.created = created
        self.zone_name = zone_name
        super().__init__(f"Apply failed on zone {zone_name}: {message}", message_args=[zone_name])
