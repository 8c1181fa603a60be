"""Immutable request models for the routing client.

Requests are frozen dataclasses with slots, like the response entities
they are never mutated after construction. Coordinates reuse the
GeoWaypoint wire model so the same value can be sent and received.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .response import GeoWaypoint, RegionDefinition


class TransportMode(Enum):
    """Mode of travel governing routing constraints.

    UNSPECIFIED and INVALID are sentinels: they are what ``parse`` yields for
    a missing or unrecognised token and are never sent to the service.
    """

    UNSPECIFIED = "unspecified"
    INVALID = "invalid"
    CAR = "car"
    TRUCK = "truck"
    PEDESTRIAN = "pedestrian"
    BICYCLE = "bicycle"
    SCOOTER = "scooter"
    TAXI = "taxi"
    BUS = "bus"
    PRIVATE_BUS = "privateBus"

    @classmethod
    def parse(cls, token: Union[TransportMode, str, None]) -> TransportMode:
        """Resolve a raw token (or an existing member) to a TransportMode."""
        if isinstance(token, cls):
            return token
        if token is None or not str(token).strip():
            return cls.UNSPECIFIED
        try:
            return cls(str(token).strip())
        except ValueError:
            return cls.INVALID

    @property
    def is_routable(self) -> bool:
        return self not in (TransportMode.UNSPECIFIED, TransportMode.INVALID)

    def __str__(self) -> str:
        return self.value


class MatrixAttribute(Enum):
    """Values the matrix service can calculate per origin/destination pair."""

    TRAVEL_TIMES = "travelTimes"
    DISTANCES = "distances"


@dataclass(frozen=True, slots=True)
class RoutesRequest:
    """Route calculation between two points.

    Attributes:
        transport_mode: Mode of travel, as a TransportMode or its token
        origin: Start of the route
        destination: End of the route
    """

    transport_mode: Union[TransportMode, str]
    origin: GeoWaypoint
    destination: GeoWaypoint


@dataclass(frozen=True, slots=True)
class MatrixRequest:
    """Matrix calculation over sets of origins and destinations.

    An empty ``destinations`` means the matrix is origins x origins.

    Attributes:
        origins: Row waypoints
        destinations: Column waypoints
        transport_mode: Mode of travel, as a TransportMode or its token
        matrix_attributes: What to calculate for each pair
        region_definition: Region the matrix is calculated in
    """

    origins: tuple[GeoWaypoint, ...]
    destinations: tuple[GeoWaypoint, ...] = field(default_factory=tuple)
    transport_mode: Union[TransportMode, str] = TransportMode.CAR
    matrix_attributes: tuple[MatrixAttribute, ...] = (MatrixAttribute.TRAVEL_TIMES,)
    region_definition: Optional[RegionDefinition] = field(
        default_factory=RegionDefinition.world
    )

    @property
    def num_destinations(self) -> int:
        return len(self.destinations) if self.destinations else len(self.origins)
