"""Tests for MatrixService.calculate_matrix against a fake transport."""

import json
from urllib.parse import parse_qs

import pytest

from here_routing.domain.context import CallContext
from here_routing.domain.errors import (
    RequestCancelledError,
    RequestConstructionError,
    RequestValidationError,
)
from here_routing.domain.models import MatrixAttribute, MatrixRequest
from here_routing.domain.response import CalculateMatrixResponse, ErrorCode, GeoWaypoint
from here_routing.services import MatrixService

BASE_URL = "https://matrix.router.hereapi.com/v8/"

BODY = {
    "matrixId": "c1b6f3f4",
    "matrix": {
        "numOrigins": 2,
        "numDestinations": 3,
        "travelTimes": [0, 120, 300, 130, 0, 240],
        "distances": [0, 900, 2500, 950, 0, 1800],
        "errorCodes": [0, 0, 0, 0, 1, 0],
    },
    "regionDefinition": {"type": "world"},
}

ORIGINS = (GeoWaypoint(lat=52.52, long=13.40), GeoWaypoint(lat=52.50, long=13.35))
DESTINATIONS = (
    GeoWaypoint(lat=52.52, long=13.40),
    GeoWaypoint(lat=52.53, long=13.38),
    GeoWaypoint(lat=52.49, long=13.42),
)


def make_request(**kwargs):
    params = {
        "origins": ORIGINS,
        "destinations": DESTINATIONS,
        "matrix_attributes": (MatrixAttribute.TRAVEL_TIMES, MatrixAttribute.DISTANCES),
    }
    params.update(kwargs)
    return MatrixRequest(**params)


def test_calculate_matrix(fake_client):
    client = fake_client(body=BODY)
    service = MatrixService(client=client, base_url=BASE_URL)

    response = service.calculate_matrix(make_request())

    assert isinstance(response, CalculateMatrixResponse)
    assert response.matrix_id == "c1b6f3f4"
    assert response.matrix.travel_time(1, 2) == 240
    assert response.matrix.distance(0, 1) == 900
    assert response.matrix.error_code(1, 1) == ErrorCode.DISCONNECTED
    assert response.matrix.has_errors
    assert response.region_definition.type == "world"


def test_posts_json_body(fake_client):
    client = fake_client(body=BODY)
    service = MatrixService(client=client, base_url=BASE_URL)

    service.calculate_matrix(make_request(transport_mode="truck"))

    call = client.new_request_calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://matrix.router.hereapi.com/v8/matrix"
    assert parse_qs(call["query"]) == {"async": ["false"]}
    assert call["body"]["transportMode"] == "truck"
    assert len(call["body"]["origins"]) == 2
    assert len(call["body"]["destinations"]) == 3
    assert json.loads(client.do_calls[0].body)["matrixAttributes"] == ["travelTimes", "distances"]


def test_not_requested_attribute_is_absent(fake_client):
    body = {
        "matrixId": "m",
        "matrix": {"numOrigins": 2, "numDestinations": 3, "travelTimes": [1, 2, 3, 4, 5, 6]},
        "regionDefinition": {"type": "world"},
    }
    client = fake_client(body=body)
    service = MatrixService(client=client, base_url=BASE_URL)

    response = service.calculate_matrix(make_request(matrix_attributes=(MatrixAttribute.TRAVEL_TIMES,)))

    assert response.matrix.distances is None
    assert response.matrix.error_codes is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"transport_mode": "invalid"},
        {"transport_mode": "unspecified"},
        {"origins": ()},
        {"matrix_attributes": ()},
        {"region_definition": None},
    ],
)
def test_validation_makes_no_call(fake_client, kwargs):
    client = fake_client(body=BODY)
    service = MatrixService(client=client, base_url=BASE_URL)

    with pytest.raises(RequestValidationError):
        service.calculate_matrix(make_request(**kwargs))

    assert not client.called


def test_request_construction_error_is_wrapped(fake_client):
    client = fake_client(body=BODY, new_request_error=TypeError("not serialisable"))
    service = MatrixService(client=client, base_url=BASE_URL)

    with pytest.raises(RequestConstructionError) as exc_info:
        service.calculate_matrix(make_request())

    assert exc_info.value.message == "unable to create post request"


def test_cancelled_in_flight(fake_client):
    client = fake_client(body=BODY, on_do=lambda request: request.ctx.cancel())
    service = MatrixService(client=client, base_url=BASE_URL)

    with pytest.raises(RequestCancelledError):
        service.calculate_matrix(make_request(), CallContext())
