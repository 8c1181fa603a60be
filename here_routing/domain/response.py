"""Typed wire model for HERE Routing v8 and Matrix Routing v8 responses.

All entities are frozen pydantic models. Attribute names are snake_case and
map to the camelCase wire names through an alias generator. Fields missing
on the wire keep their zero value (0, "", empty tuple or None) instead of
failing the decode; unknown wire fields are ignored.

See https://developer.here.com/documentation/routing-api/ and
https://developer.here.com/documentation/matrix-routing-api/ for the
meaning of each field.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import (
    AwareDatetime,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    PlainValidator,
    StrictInt,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import core_schema

from .errors import DecodeError

M = TypeVar("M", bound="WireModel")

Int32 = Annotated[StrictInt, Field(ge=-(2**31), le=2**31 - 1)]


def _require_rfc3339(value: Any) -> Any:
    # pydantic would read numbers as unix epochs; the wire only sends strings.
    if isinstance(value, (int, float)):
        raise ValueError("timestamp must be an RFC 3339 string with an offset")
    return value


# Offset-aware time. Naive strings and epoch numbers fail the decode.
Timestamp = Annotated[AwareDatetime, BeforeValidator(_require_rfc3339)]


class WireModel(BaseModel):
    """Base for every decoded entity."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_wire(self) -> Dict[str, Any]:
        """JSON-shaped dict using wire names, omitting absent values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(int):
    """Per origin/destination routing status.

    The service documents a handful of codes but may add more at any time,
    so this is an open enumeration: any integer is a valid ErrorCode and is
    kept verbatim. The documented values are available as class attributes
    for comparison and display.
    """

    SUCCESS: ClassVar[ErrorCode]
    DISCONNECTED: ClassVar[ErrorCode]
    MATCHING_FAILED: ClassVar[ErrorCode]
    PARAMETER_VIOLATION: ClassVar[ErrorCode]
    UNKNOWN: ClassVar[ErrorCode]

    @property
    def name(self) -> str:
        return _ERROR_CODE_NAMES.get(int(self), str(int(self)))

    @property
    def is_known(self) -> bool:
        return int(self) in _ERROR_CODE_NAMES

    @property
    def is_success(self) -> bool:
        return int(self) == 0

    def __repr__(self) -> str:
        if self.is_known:
            return f"ErrorCode.{self.name}"
        return f"ErrorCode({int(self)})"

    __str__ = __repr__

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.int_schema(strict=True),
            serialization=core_schema.plain_serializer_function_ser_schema(
                int, return_schema=core_schema.int_schema()
            ),
        )


_ERROR_CODE_NAMES: Dict[int, str] = {
    0: "SUCCESS",
    1: "DISCONNECTED",
    2: "MATCHING_FAILED",
    3: "PARAMETER_VIOLATION",
    99: "UNKNOWN",
}

for _code, _name in _ERROR_CODE_NAMES.items():
    setattr(ErrorCode, _name, ErrorCode(_code))

_RAW_ERROR_CODES = TypeAdapter(list[StrictInt])


def decode_error_codes(value: Any) -> Tuple[ErrorCode, ...]:
    """Decode the wire ``errorCodes`` array.

    The array is first parsed strictly as plain integers; any element that
    is not an integer fails the whole field. Each integer is then turned
    into an ErrorCode in order, with no range check.

    Raises:
        ValueError: If the value is not an array of integers.
    """
    if isinstance(value, tuple):
        value = list(value)
    try:
        raw = _RAW_ERROR_CODES.validate_python(value, strict=True)
    except ValidationError as exc:
        raise ValueError(f"errorCodes must be an array of integers ({exc})") from exc

    return tuple(ErrorCode(code) for code in raw)


def encode_error_codes(codes: Tuple[ErrorCode, ...]) -> list[int]:
    return [int(code) for code in codes]


ErrorCodes = Annotated[
    Tuple[ErrorCode, ...],
    PlainValidator(decode_error_codes),
    PlainSerializer(encode_error_codes, return_type=list[int]),
]


# ---------------------------------------------------------------------------
# Shared entities
# ---------------------------------------------------------------------------


class GeoWaypoint(WireModel):
    """A latitude/longitude pair (wire names ``lat``/``lng``)."""

    lat: float = Field(default=0.0, ge=-90, le=90)
    long: float = Field(default=0.0, ge=-180, le=180, alias="lng")


class Summary(WireModel):
    # Durations in seconds, lengths in meters.
    duration: Int32 = 0
    length: Int32 = 0
    base_duration: Int32 = 0


class Place(WireModel):
    type: str = ""
    location: GeoWaypoint = Field(default_factory=GeoWaypoint)
    original_location: GeoWaypoint = Field(default_factory=GeoWaypoint)


class RoutePlace(WireModel):
    time: Optional[Timestamp] = None
    place: Place = Field(default_factory=Place)


class Span(WireModel):
    """Part of a section where the requested span attributes are constant.

    ``incidents`` and ``notices`` index into the owning section's lists.
    """

    offset: StrictInt = 0
    length: StrictInt = 0
    duration: StrictInt = 0
    speed_limit: Optional[float] = None
    max_speed: Optional[float] = None
    incidents: Tuple[StrictInt, ...] = ()
    notices: Tuple[StrictInt, ...] = ()


class NoticeDetail(WireModel):
    type: str = ""
    cause: str = ""
    max_gross_weight: StrictInt = 0


class Notice(WireModel):
    title: str = ""
    code: str = ""
    severity: str = ""
    details: Tuple[NoticeDetail, ...] = ()


class Transport(WireModel):
    mode: str = ""


class Incident(WireModel):
    type: str = ""
    criticality: str = ""
    valid_from: Optional[Timestamp] = None
    valid_until: Optional[Timestamp] = None
    description: str = ""


class Price(WireModel):
    type: str = ""
    currency: str = ""
    value: float = 0.0


class Fare(WireModel):
    id: str = ""
    name: str = ""
    price: Price = Field(default_factory=Price)
    converted_price: Optional[Price] = None
    reason: str = ""
    payment_methods: Tuple[str, ...] = ()


class TollCollectionLocation(WireModel):
    name: str = ""
    location: GeoWaypoint = Field(default_factory=GeoWaypoint)


class Toll(WireModel):
    country_code: str = ""
    toll_system_ref: StrictInt = 0
    toll_system: str = ""
    fares: Tuple[Fare, ...] = ()
    toll_collection_locations: Tuple[TollCollectionLocation, ...] = ()


class TollSystem(WireModel):
    id: StrictInt = 0
    name: str = ""
    language_code: str = ""


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


class Section(WireModel):
    """A mode-homogeneous leg of a route."""

    id: str = ""
    type: str = ""
    departure: RoutePlace = Field(default_factory=RoutePlace)
    arrival: RoutePlace = Field(default_factory=RoutePlace)
    summary: Summary = Field(default_factory=Summary)
    travel_summary: Summary = Field(default_factory=Summary)
    # Flexible polyline encoding, kept as received.
    polyline: str = ""
    spans: Tuple[Span, ...] = ()
    notices: Tuple[Notice, ...] = ()
    language: str = ""
    transport: Transport = Field(default_factory=Transport)
    incidents: Tuple[Incident, ...] = ()
    tolls: Tuple[Toll, ...] = ()
    toll_systems: Tuple[TollSystem, ...] = ()


class Route(WireModel):
    id: str = ""
    sections: Tuple[Section, ...] = ()


class RoutesResponse(WireModel):
    """Possible routes between the origin and the destination.

    Attributes:
        routes: Alternatives ordered as returned by the service
        error_codes: Per-route errors, None when no errors occurred
    """

    routes: Tuple[Route, ...] = ()
    error_codes: Optional[ErrorCodes] = None


# ---------------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------------


class RegionDefinition(WireModel):
    """Region the matrix is calculated in.

    Only the ``type`` tag is interpreted here; every other field (center,
    radius, polygon, ...) is carried through as received.
    """

    model_config = ConfigDict(extra="allow")

    type: str = ""

    @classmethod
    def world(cls) -> RegionDefinition:
        return cls(type="world")


class MatrixResponse(WireModel):
    """Calculated route matrix, row-major over origins x destinations.

    ``travel_times`` and ``distances`` are None when they were not requested
    in the matrix attributes; ``error_codes`` is None when no errors
    occurred.
    """

    num_origins: StrictInt = 0
    num_destinations: StrictInt = 0
    travel_times: Optional[Tuple[Int32, ...]] = None
    distances: Optional[Tuple[Int32, ...]] = None
    error_codes: Optional[ErrorCodes] = None

    @field_validator("travel_times", "distances")
    @classmethod
    def _check_dimensions(
        cls, values: Optional[Tuple[int, ...]], info: ValidationInfo
    ) -> Optional[Tuple[int, ...]]:
        if values is None:
            return values
        num_origins = info.data.get("num_origins", 0)
        num_destinations = info.data.get("num_destinations", 0)
        expected = num_origins * num_destinations
        if len(values) != expected:
            raise ValueError(
                f"has {len(values)} entries, expected "
                f"{num_origins}x{num_destinations}={expected}"
            )
        return values

    def _index(self, origin: int, destination: int) -> int:
        if not 0 <= origin < self.num_origins:
            raise IndexError(f"origin index {origin} out of range")
        if not 0 <= destination < self.num_destinations:
            raise IndexError(f"destination index {destination} out of range")
        return origin * self.num_destinations + destination

    def travel_time(self, origin: int, destination: int) -> Optional[int]:
        """Travel time in seconds, or None if travel times were not requested."""
        if self.travel_times is None:
            return None
        return self.travel_times[self._index(origin, destination)]

    def distance(self, origin: int, destination: int) -> Optional[int]:
        """Distance in meters, or None if distances were not requested."""
        if self.distances is None:
            return None
        return self.distances[self._index(origin, destination)]

    def error_code(self, origin: int, destination: int) -> ErrorCode:
        if self.error_codes is None:
            self._index(origin, destination)
            return ErrorCode.SUCCESS
        return self.error_codes[self._index(origin, destination)]

    @property
    def has_errors(self) -> bool:
        return self.error_codes is not None and any(
            not code.is_success for code in self.error_codes
        )


class CalculateMatrixResponse(WireModel):
    matrix_id: str = ""
    matrix: MatrixResponse = Field(default_factory=MatrixResponse)
    region_definition: RegionDefinition = Field(default_factory=RegionDefinition)


class HereErrorResponse(WireModel):
    """Error envelope returned by the service for a rejected request."""

    title: str = ""
    status: StrictInt = 0
    code: str = ""
    cause: str = ""
    action: str = ""
    correlation_id: str = ""


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _field_path(loc: Tuple[Union[int, str], ...]) -> str:
    return ".".join(str(part) for part in loc)


def decode_response(
    response_type: Type[M],
    payload: Union[bytes, str, Mapping[str, Any]],
) -> M:
    """Decode a response body into ``response_type``.

    Args:
        response_type: The WireModel subclass to produce.
        payload: Raw JSON body, or an already parsed mapping.

    Returns:
        A fully populated, immutable instance.

    Raises:
        DecodeError: If the body is not JSON or a field does not match.
    """
    try:
        if isinstance(payload, (bytes, bytearray, str)):
            return response_type.model_validate_json(payload)
        return response_type.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.error_count() else {}
        path = _field_path(tuple(first.get("loc", ())))
        reason = first.get("msg", str(exc))
        raise DecodeError(
            f"cannot decode {response_type.__name__} field '{path}': {reason}",
            cause=exc,
            field_path=path,
            type_name=response_type.__name__,
        ) from exc