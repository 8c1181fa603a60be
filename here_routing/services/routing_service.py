"""Routing service - Route calculation between two points.

Wraps GET <base>/routes of the HERE Routing API v8. See
https://developer.here.com/documentation/routing-api/dev_guide/topics/send-request.html
for the meaning of the query parameters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..domain.context import CallContext
from ..domain.models import RoutesRequest
from ..domain.response import RoutesResponse
from ..ports.transport import ClientPort
from .exchange import exchange
from .query import build_routes_query, encode_query, resolve_endpoint, resolve_transport_mode


@dataclass
class RoutingService:
    """Calculates routes through an injected transport.

    The service holds no per-call state; one instance can serve concurrent
    callers.

    Attributes:
        client: HTTP transport
        base_url: Routing API root, e.g. https://router.hereapi.com/v8/
    """

    client: ClientPort
    base_url: str

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def routes(
        self,
        request: RoutesRequest,
        ctx: Optional[CallContext] = None,
    ) -> RoutesResponse:
        """Return all possible routes between origin and destination.

        Return attributes, span attributes, the number of alternatives (6)
        and the currency (EUR) are fixed.

        Args:
            request: Transport mode, origin and destination.
            ctx: Caller's cancellation context, forwarded to the transport.

        Returns:
            The decoded RoutesResponse.

        Raises:
            RequestValidationError: If the transport mode is unspecified or
                invalid. No request is made.
            QueryConstructionError: If the base URL is malformed.
            RequestConstructionError: If the client cannot build the request.
            TransportError: Network, status or cancellation failures.
            DecodeError: If the body does not match RoutesResponse.
        """
        ctx = ctx or CallContext.background()
        mode = resolve_transport_mode(request.transport_mode)

        url = resolve_endpoint(self.base_url, "routes")
        query = encode_query(build_routes_query(mode, request.origin, request.destination))

        self._logger.info(
            "Requesting routes",
            extra={"transport_mode": mode.value, "url": url},
        )
        response = exchange(self.client, ctx, url, "GET", query, None, RoutesResponse)
        self._logger.info(
            "Routes received",
            extra={
                "routes": len(response.routes),
                "error_codes": len(response.error_codes or ()),
            },
        )
        return response
