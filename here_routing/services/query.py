"""Query construction for the routing and matrix endpoints."""

from __future__ import annotations

from typing import Any, Dict, Mapping
from urllib.parse import urlencode, urljoin, urlsplit, urlunsplit

from ..domain.errors import QueryConstructionError, RequestValidationError
from ..domain.models import MatrixAttribute, MatrixRequest, TransportMode
from ..domain.response import GeoWaypoint

ROUTE_RETURN_ATTRIBUTES = (
    "summary",
    "polyline",
    "elevation",
    "actions",
    "instructions",
    "travelSummary",
    "tolls",
    "incidents",
)
ROUTE_SPAN_ATTRIBUTES = (
    "length",
    "duration",
    "maxSpeed",
    "speedLimit",
    "incidents",
    "notices",
)
ROUTE_ALTERNATIVES = 6
ROUTE_CURRENCY = "EUR"


def resolve_transport_mode(value: Any) -> TransportMode:
    """Resolve and validate the requested transport mode.

    Raises:
        RequestValidationError: For the unspecified or invalid sentinels.
    """
    mode = TransportMode.parse(value)
    if not mode.is_routable:
        raise RequestValidationError(
            f"invalid transport mode: {value!r}",
            field_name="transport_mode",
        )
    return mode


def resolve_endpoint(base_url: str, path: str) -> str:
    """Join ``path`` onto ``base_url`` like a relative link.

    Raises:
        QueryConstructionError: If the base URL is not absolute http(s).
    """
    try:
        parts = urlsplit(base_url)
    except ValueError as exc:
        raise QueryConstructionError("malformed base URL", cause=exc, url=base_url) from exc
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise QueryConstructionError(
            f"base URL must be absolute http(s): {base_url!r}", url=base_url
        )
    if not parts.path.endswith("/"):
        base_url = urlunsplit(parts._replace(path=parts.path + "/", query="", fragment=""))
    return urljoin(base_url, path)


def format_coordinate(value: float) -> str:
    """Shortest decimal form of ``value`` that round-trips.

    Integral values drop the trailing ``.0``, so 3.0 is written as ``3``.
    """
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_waypoint(waypoint: GeoWaypoint) -> str:
    return f"{format_coordinate(waypoint.lat)},{format_coordinate(waypoint.long)}"


def build_routes_query(
    mode: TransportMode,
    origin: GeoWaypoint,
    destination: GeoWaypoint,
) -> Dict[str, str]:
    return {
        "return": ",".join(ROUTE_RETURN_ATTRIBUTES),
        "transportMode": mode.value,
        "origin": format_waypoint(origin),
        "destination": format_waypoint(destination),
        "spans": ",".join(ROUTE_SPAN_ATTRIBUTES),
        "alternatives": str(ROUTE_ALTERNATIVES),
        "currency": ROUTE_CURRENCY,
    }


def build_matrix_body(request: MatrixRequest, mode: TransportMode) -> Dict[str, Any]:
    """JSON body of a synchronous matrix calculation.

    Raises:
        RequestValidationError: If origins, attributes or region are missing.
    """
    if not request.origins:
        raise RequestValidationError(
            "at least one origin is required", field_name="origins"
        )
    if not request.matrix_attributes:
        raise RequestValidationError(
            "at least one matrix attribute is required",
            field_name="matrix_attributes",
        )
    if request.region_definition is None:
        raise RequestValidationError(
            "a region definition is required", field_name="region_definition"
        )
    try:
        attributes = [MatrixAttribute(value).value for value in request.matrix_attributes]
    except ValueError as exc:
        raise RequestValidationError(
            f"unknown matrix attribute in {request.matrix_attributes!r}",
            cause=exc,
            field_name="matrix_attributes",
        ) from exc

    body: Dict[str, Any] = {
        "origins": [waypoint.to_wire() for waypoint in request.origins],
        "regionDefinition": request.region_definition.to_wire(),
        "transportMode": mode.value,
        "matrixAttributes": attributes,
    }
    if request.destinations:
        body["destinations"] = [waypoint.to_wire() for waypoint in request.destinations]
    return body


def encode_query(values: Mapping[str, str]) -> str:
    """Standard query-string encoding with keys sorted."""
    return urlencode(sorted(values.items()))
