"""Domain layer - Request models, response entities and errors.

Request models are frozen dataclasses; response entities are frozen
pydantic models decoded from the service's JSON bodies.
"""

from .context import CallContext
from .errors import (
    ConfigurationError,
    DecodeError,
    HereRoutingError,
    HereServiceError,
    QueryConstructionError,
    RequestCancelledError,
    RequestConstructionError,
    RequestValidationError,
    TransportError,
)
from .models import MatrixAttribute, MatrixRequest, RoutesRequest, TransportMode
from .response import (
    CalculateMatrixResponse,
    ErrorCode,
    Fare,
    GeoWaypoint,
    HereErrorResponse,
    Incident,
    MatrixResponse,
    Notice,
    NoticeDetail,
    Place,
    Price,
    RegionDefinition,
    Route,
    RoutePlace,
    RoutesResponse,
    Section,
    Span,
    Summary,
    Toll,
    TollCollectionLocation,
    TollSystem,
    Transport,
    decode_error_codes,
    decode_response,
)

__all__ = [
    # Requests
    "CallContext",
    "MatrixAttribute",
    "MatrixRequest",
    "RoutesRequest",
    "TransportMode",
    # Responses
    "CalculateMatrixResponse",
    "ErrorCode",
    "Fare",
    "GeoWaypoint",
    "HereErrorResponse",
    "Incident",
    "MatrixResponse",
    "Notice",
    "NoticeDetail",
    "Place",
    "Price",
    "RegionDefinition",
    "Route",
    "RoutePlace",
    "RoutesResponse",
    "Section",
    "Span",
    "Summary",
    "Toll",
    "TollCollectionLocation",
    "TollSystem",
    "Transport",
    "decode_error_codes",
    "decode_response",
    # Errors
    "HereRoutingError",
    "RequestValidationError",
    "QueryConstructionError",
    "RequestConstructionError",
    "TransportError",
    "RequestCancelledError",
    "HereServiceError",
    "DecodeError",
    "ConfigurationError",
]
