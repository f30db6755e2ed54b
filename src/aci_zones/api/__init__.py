"""Framework-neutral request/response mapping for zone resources."""

from aci_zones.api.responses import ApiResponse, ErrorCode, classify, error_body, error_response
from aci_zones.api.zones import ZoneApi, decode_zone_request

__all__ = [
    "ApiResponse",
    "ErrorCode",
    "ZoneApi",
    "classify",
    "decode_zone_request",
    "error_body",
    "error_response",
]
