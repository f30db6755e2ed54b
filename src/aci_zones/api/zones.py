"""Zone collection and zone resource request handling."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from aci_zones.api.responses import ApiResponse, error_response
from aci_zones.engine.errors import MalformedRequestError, ZoneError
from aci_zones.resources.zone import ZoneRequest

if TYPE_CHECKING:
    from aci_zones.engine.lifecycle import ZoneLifecycleManager

logger = logging.getLogger(__name__)


def decode_zone_request(body: bytes | str | Mapping[str, Any]) -> ZoneRequest:
    """Decode a creation request body.

    Raises:
        MalformedRequestError: If the body is not a JSON object of the
            expected shape.
    """
    try:
        if isinstance(body, Mapping):
            return ZoneRequest.model_validate(dict(body))
        return ZoneRequest.model_validate_json(body)
    except ValidationError as exc:
        msg = f"error while trying to get JSON body from the request: {exc}"
        logger.error(msg)
        raise MalformedRequestError(msg) from exc


class ZoneApi:
    """Request handlers for ``/ODIM/v1/Fabrics/{id}/Zones``.

    Every method returns an :class:`ApiResponse`; zone errors become error
    envelopes, anything else propagates to the hosting framework.
    """

    def __init__(self, manager: ZoneLifecycleManager) -> None:
        self._manager = manager

    def get_zones(self, fabric_id: str) -> ApiResponse:
        try:
            collection = self._manager.get_zones(fabric_id)
        except ZoneError as exc:
            return error_response(exc)
        return ApiResponse(status_code=HTTPStatus.OK, body=collection.to_json())

    def get_zone(self, fabric_id: str, uri: str) -> ApiResponse:
        try:
            zone = self._manager.get_zone(fabric_id, uri)
        except ZoneError as exc:
            return error_response(exc)
        return ApiResponse(status_code=HTTPStatus.OK, body=zone.to_json())

    def create_zone(self, fabric_id: str, body: bytes | str | Mapping[str, Any]) -> ApiResponse:
        try:
            # Unknown fabric is reported before anything about the body.
            self._manager.require_fabric(fabric_id)
            zone = self._manager.create_zone(fabric_id, decode_zone_request(body))
        except ZoneError as exc:
            return error_response(exc)
        return ApiResponse(
            status_code=HTTPStatus.CREATED,
            body=zone.to_json(),
            headers={"Location": zone.resource_uri},
        )

    def delete_zone(self, fabric_id: str, uri: str) -> ApiResponse:
        try:
            self._manager.delete_zone(fabric_id, uri)
        except ZoneError as exc:
            return error_response(exc)
        return ApiResponse(status_code=HTTPStatus.NO_CONTENT)
