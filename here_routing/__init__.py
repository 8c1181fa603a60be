"""Typed client for the HERE Routing v8 and Matrix Routing v8 services.

The package turns typed requests into encoded queries, sends them through
an injectable transport and decodes the JSON bodies into immutable
response entities.

    from here_routing import (
        GeoWaypoint, RoutesRequest, RoutingService, TransportMode, get_container,
    )

    service = get_container().resolve(RoutingService)
    response = service.routes(
        RoutesRequest(
            transport_mode=TransportMode.CAR,
            origin=GeoWaypoint(lat=52.5308, long=13.3847),
            destination=GeoWaypoint(lat=52.5323, long=13.3789),
        )
    )
"""

from .container import Container, get_container, reset_container
from .domain import (
    CalculateMatrixResponse,
    CallContext,
    DecodeError,
    ErrorCode,
    GeoWaypoint,
    HereErrorResponse,
    HereRoutingError,
    HereServiceError,
    MatrixAttribute,
    MatrixRequest,
    MatrixResponse,
    QueryConstructionError,
    RegionDefinition,
    RequestCancelledError,
    RequestConstructionError,
    RequestValidationError,
    Route,
    RoutesRequest,
    RoutesResponse,
    Section,
    TransportError,
    TransportMode,
)
from .services import MatrixService, RoutingService

__all__ = [
    "Container",
    "get_container",
    "reset_container",
    "RoutingService",
    "MatrixService",
    "CallContext",
    "GeoWaypoint",
    "TransportMode",
    "MatrixAttribute",
    "RoutesRequest",
    "MatrixRequest",
    "RegionDefinition",
    "ErrorCode",
    "Route",
    "Section",
    "RoutesResponse",
    "MatrixResponse",
    "CalculateMatrixResponse",
    "HereErrorResponse",
    "HereRoutingError",
    "RequestValidationError",
    "QueryConstructionError",
    "RequestConstructionError",
    "TransportError",
    "RequestCancelledError",
    "HereServiceError",
    "DecodeError",
]
