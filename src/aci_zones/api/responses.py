"""Map zone errors to HTTP status codes and Redfish error envelopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any

from aci_zones.engine.errors import (
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

MESSAGE_REGISTRY = "Base.1.13.0"


class ErrorCode(str, Enum):
    RESOURCE_NOT_FOUND = "ResourceNotFound"
    MALFORMED_JSON = "MalformedJSON"
    PROPERTY_MISSING = "PropertyMissing"
    RESOURCE_ALREADY_EXISTS = "ResourceAlreadyExists"
    RESOURCE_CANNOT_BE_DELETED = "ResourceCannotBeDeleted"
    GENERAL_ERROR = "GeneralError"


# Most specific classes first.
_ERROR_MAP: tuple[tuple[type[ZoneError], HTTPStatus, ErrorCode], ...] = (
    (MalformedRequestError, HTTPStatus.BAD_REQUEST, ErrorCode.MALFORMED_JSON),
    (ZoneValidationError, HTTPStatus.BAD_REQUEST, ErrorCode.PROPERTY_MISSING),
    (ZoneNotFoundError, HTTPStatus.NOT_FOUND, ErrorCode.RESOURCE_NOT_FOUND),
    (ZoneConflictError, HTTPStatus.CONFLICT, ErrorCode.RESOURCE_ALREADY_EXISTS),
    (ZonePreconditionError, HTTPStatus.NOT_ACCEPTABLE, ErrorCode.RESOURCE_CANNOT_BE_DELETED),
    (ExternalAdapterError, HTTPStatus.BAD_REQUEST, ErrorCode.GENERAL_ERROR),
    (UnsupportedZoneTypeError, HTTPStatus.NOT_IMPLEMENTED, ErrorCode.GENERAL_ERROR),
    (UnsupportedOperationError, HTTPStatus.NOT_IMPLEMENTED, ErrorCode.GENERAL_ERROR),
)


@dataclass(frozen=True)
class ApiResponse:
    """Framework-neutral response: status, JSON body (or none) and headers."""

    status_code: int
    body: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)


def classify(exc: ZoneError) -> tuple[HTTPStatus, ErrorCode]:
    """Return the status code and error code class for a zone error."""
    for exc_type, status, code in _ERROR_MAP:
        if isinstance(exc, exc_type):
            return status, code
    return HTTPStatus.INTERNAL_SERVER_ERROR, ErrorCode.GENERAL_ERROR


def error_body(
    code: ErrorCode, message: str, message_args: list[Any] | None = None
) -> dict[str, Any]:
    """Build the Redfish error envelope."""
    return {
        "error": {
            "code": f"{MESSAGE_REGISTRY}.{ErrorCode.GENERAL_ERROR.value}",
            "message": "An error has occurred. See ExtendedInfo for more information.",
            "@Message.ExtendedInfo": [
                {
                    "@odata.type": "#Message.v1_1_2.Message",
                    "MessageId": f"{MESSAGE_REGISTRY}.{code.value}",
                    "Message": message,
                    "MessageArgs": list(message_args or []),
                }
            ],
        }
    }


def error_response(exc: ZoneError) -> ApiResponse:
    status, code = classify(exc)
    return ApiResponse(
        status_code=int(status),
        body=error_body(code, exc.message, exc.message_args),
    )
