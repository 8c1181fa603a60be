"""Tests for RoutingService.routes against a fake transport."""

from urllib.parse import parse_qs, urlsplit

import pytest

from here_routing.domain.context import CallContext
from here_routing.domain.errors import (
    DecodeError,
    QueryConstructionError,
    RequestCancelledError,
    RequestConstructionError,
    RequestValidationError,
    TransportError,
)
from here_routing.domain.models import RoutesRequest, TransportMode
from here_routing.domain.response import ErrorCode, GeoWaypoint, RoutesResponse
from here_routing.services import RoutingService

BASE_URL = "https://router.hereapi.com/v8/"
BODY = '{"routes":[{"id":"r1","sections":[]}],"errorCodes":[0]}'


def make_request(mode=TransportMode.CAR):
    return RoutesRequest(
        transport_mode=mode,
        origin=GeoWaypoint(lat=1.5, long=2.5),
        destination=GeoWaypoint(lat=3.0, long=4.0),
    )


class TestRoutes:
    def test_end_to_end(self, fake_client):
        client = fake_client(body=BODY)
        service = RoutingService(client=client, base_url=BASE_URL)

        response = service.routes(make_request())

        assert isinstance(response, RoutesResponse)
        assert len(response.routes) == 1
        assert response.routes[0].id == "r1"
        assert response.routes[0].sections == ()
        assert response.error_codes == (ErrorCode.SUCCESS,)

    def test_issues_one_get_with_expected_query(self, fake_client):
        client = fake_client(body=BODY)
        service = RoutingService(client=client, base_url=BASE_URL)

        service.routes(make_request())

        assert len(client.new_request_calls) == 1
        assert len(client.do_calls) == 1
        call = client.new_request_calls[0]
        assert call["method"] == "GET"
        assert call["url"] == "https://router.hereapi.com/v8/routes"
        assert call["body"] is None

        query = parse_qs(call["query"])
        assert query["origin"] == ["1.5,2.5"]
        assert query["destination"] == ["3,4"]
        assert query["transportMode"] == ["car"]
        assert query["alternatives"] == ["6"]
        assert query["currency"] == ["EUR"]
        assert query["spans"] == ["length,duration,maxSpeed,speedLimit,incidents,notices"]
        assert set(query) == {
            "return",
            "transportMode",
            "origin",
            "destination",
            "spans",
            "alternatives",
            "currency",
        }

    def test_accepts_string_token(self, fake_client):
        client = fake_client(body=BODY)
        service = RoutingService(client=client, base_url=BASE_URL)

        service.routes(make_request(mode="pedestrian"))

        sent = urlsplit(client.do_calls[0].url)
        assert parse_qs(sent.query)["transportMode"] == ["pedestrian"]

    @pytest.mark.parametrize(
        "mode", ["invalid", "unspecified", TransportMode.INVALID, TransportMode.UNSPECIFIED, "hovercraft"]
    )
    def test_invalid_transport_mode_makes_no_call(self, fake_client, mode):
        client = fake_client(body=BODY)
        service = RoutingService(client=client, base_url=BASE_URL)

        with pytest.raises(RequestValidationError):
            service.routes(make_request(mode=mode))

        assert not client.called

    def test_malformed_base_url(self, fake_client):
        client = fake_client(body=BODY)
        service = RoutingService(client=client, base_url="not a url")

        with pytest.raises(QueryConstructionError):
            service.routes(make_request())

        assert not client.called

    def test_request_construction_error_is_wrapped(self, fake_client):
        cause = ValueError("bad url")
        client = fake_client(body=BODY, new_request_error=cause)
        service = RoutingService(client=client, base_url=BASE_URL)

        with pytest.raises(RequestConstructionError) as exc_info:
            service.routes(make_request())

        assert exc_info.value.cause is cause
        assert exc_info.value.method == "GET"
        assert str(exc_info.value) == "unable to create get request: bad url"
        assert client.do_calls == []

    def test_transport_error_is_returned_unchanged(self, fake_client):
        error = TransportError("connection reset", status_code=None, url=BASE_URL)
        client = fake_client(error=error)
        service = RoutingService(client=client, base_url=BASE_URL)

        with pytest.raises(TransportError) as exc_info:
            service.routes(make_request())

        assert exc_info.value is error

    def test_decode_error_aborts_whole_call(self, fake_client):
        client = fake_client(body='{"routes":[{"id":"r1"}],"errorCodes":["a"]}')
        service = RoutingService(client=client, base_url=BASE_URL)

        with pytest.raises(DecodeError):
            service.routes(make_request())


class TestCancellation:
    def test_cancelled_before_call(self, fake_client):
        client = fake_client(body=BODY)
        service = RoutingService(client=client, base_url=BASE_URL)
        ctx = CallContext()
        ctx.cancel()

        with pytest.raises(RequestCancelledError) as exc_info:
            service.routes(make_request(), ctx)

        assert exc_info.value.reason == "cancelled"
        assert not client.called

    def test_cancelled_while_in_flight_returns_no_response(self, fake_client):
        client = fake_client(body=BODY, on_do=lambda request: request.ctx.cancel())
        service = RoutingService(client=client, base_url=BASE_URL)

        with pytest.raises(RequestCancelledError):
            service.routes(make_request(), CallContext())

        assert len(client.do_calls) == 1

    def test_context_forwarded_unchanged(self, fake_client):
        client = fake_client(body=BODY)
        service = RoutingService(client=client, base_url=BASE_URL)
        ctx = CallContext.with_timeout(30)

        service.routes(make_request(), ctx)

        assert client.new_request_calls[0]["ctx"] is ctx
        assert client.do_calls[0].ctx is ctx

    def test_expired_deadline(self, fake_client):
        client = fake_client(body=BODY)
        service = RoutingService(client=client, base_url=BASE_URL)

        with pytest.raises(RequestCancelledError) as exc_info:
            service.routes(make_request(), CallContext.with_timeout(0))

        assert exc_info.value.reason == "deadline exceeded"
