"""
Response envelope for sysctl lookups.

Every lookup, successful or not, is answered with the same four-field JSON
object. Failures use the zero value of the endpoint's kind and HTTP 404.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from fastapi.responses import JSONResponse, Response

from sysctld.resolver import KIND_SPECS, Kind, Resolution, SysctlValue

logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_NOT_FOUND = 404

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_rfc1123(moment: datetime) -> str:
    """Format ``moment`` as ``Mon, 02 Jan 2006 15:04:05 MST``; naive values are taken as UTC."""
    zone = moment.tzname() or "UTC"
    return (
        f"{_WEEKDAYS[moment.weekday()]}, {moment.day:02d} {_MONTHS[moment.month - 1]} "
        f"{moment.year:04d} {moment:%H:%M:%S} {zone}"
    )


def rfc1123_now() -> str:
    return format_rfc1123(datetime.now().astimezone())


@dataclass(frozen=True, slots=True)
class SysctlResult:
    name: str
    value: SysctlValue
    timestamp: str
    error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "Value": self.value,
            "Timestamp": self.timestamp,
            "Error": self.error,
        }


def build_response(
    name: str,
    timestamp: str,
    resolution: Resolution,
    kind: Kind,
    request_id: Optional[str] = None,
) -> Tuple[SysctlResult, int]:
    """
    Shape a resolution into the response body and status code.

    Failures are logged here, once, before anything is written to the client.
    """
    if resolution.ok:
        logger.debug(
            "sysctl=%s kind=%s outcome=success request_id=%s",
            name,
            kind.value,
            request_id,
            extra={"sysctl": name, "kind": kind.value, "request_id": request_id},
        )
        return SysctlResult(name=name, value=resolution.value, timestamp=timestamp), STATUS_OK

    message = f"Could not get sysctl {name}: {resolution.reason}"
    logger.warning(
        "%s",
        message,
        extra={"sysctl": name, "kind": kind.value, "request_id": request_id, "error": resolution.reason},
    )
    body = SysctlResult(
        name=name,
        value=KIND_SPECS[kind].zero_value,
        timestamp=timestamp,
        error=message,
    )
    return body, STATUS_NOT_FOUND


def render(result: SysctlResult, status_code: int) -> Response:
    """Encode ``result`` as JSON; an unencodable result yields an empty body."""
    try:
        return JSONResponse(status_code=status_code, content=result.to_dict())
    except (TypeError, ValueError) as exc:
        logger.error("encode failed: %s", exc, extra={"sysctl": result.name, "error": str(exc)})
        return Response(status_code=status_code, media_type="application/json")
