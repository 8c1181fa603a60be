"""Matrix service - Travel times and distances over origin/destination sets.

Wraps the synchronous POST <base>/matrix?async=false of the HERE Matrix
Routing API v8.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..domain.context import CallContext
from ..domain.models import MatrixRequest
from ..domain.response import CalculateMatrixResponse
from ..ports.transport import ClientPort
from .exchange import exchange
from .query import build_matrix_body, encode_query, resolve_endpoint, resolve_transport_mode


@dataclass
class MatrixService:
    """Calculates route matrices through an injected transport.

    Attributes:
        client: HTTP transport
        base_url: Matrix API root, e.g. https://matrix.router.hereapi.com/v8/
    """

    client: ClientPort
    base_url: str

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def calculate_matrix(
        self,
        request: MatrixRequest,
        ctx: Optional[CallContext] = None,
    ) -> CalculateMatrixResponse:
        """Calculate the matrix for the requested origins and destinations.

        Args:
            request: Waypoints, transport mode, attributes and region.
            ctx: Caller's cancellation context, forwarded to the transport.

        Returns:
            The decoded CalculateMatrixResponse.

        Raises:
            RequestValidationError: Bad transport mode, no origins, no
                attributes or no region. No request is made.
            QueryConstructionError: If the base URL is malformed.
            RequestConstructionError: If the client cannot build the request.
            TransportError: Network, status or cancellation failures.
            DecodeError: If the body does not match CalculateMatrixResponse.
        """
        ctx = ctx or CallContext.background()
        mode = resolve_transport_mode(request.transport_mode)
        body = build_matrix_body(request, mode)

        url = resolve_endpoint(self.base_url, "matrix")
        query = encode_query({"async": "false"})

        self._logger.info(
            "Requesting matrix",
            extra={
                "transport_mode": mode.value,
                "origins": len(request.origins),
                "destinations": request.num_destinations,
            },
        )
        response = exchange(
            self.client, ctx, url, "POST", query, body, CalculateMatrixResponse
        )
        self._logger.info(
            "Matrix received",
            extra={
                "matrix_id": response.matrix_id,
                "has_errors": response.matrix.has_errors,
            },
        )
        return response
