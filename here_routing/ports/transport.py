"""Transport port - Abstraction for the HTTP exchange.

The services never talk HTTP themselves. They build a request through the
client, hand it back to the client to execute, and receive the decoded
typed response. Tests substitute an implementation returning canned bodies.

Implementation: adapters/transport/requests_client.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol, Type, TypeVar

if TYPE_CHECKING:
    from ..domain.context import CallContext
    from ..domain.response import WireModel

M = TypeVar("M", bound="WireModel")


@dataclass(frozen=True)
class OutboundRequest:
    """A fully built HTTP request bound to the caller's context.

    Attributes:
        ctx: Cancellation context forwarded from the caller
        method: HTTP method (GET, POST)
        url: Absolute URL including the encoded query string
        headers: Request headers
        body: Encoded request body, if any
    """

    ctx: CallContext
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None


class ClientPort(Protocol):
    """Port for the HTTP transport.

    The transport owns connection handling, authentication and body
    decoding. It performs exactly one exchange per ``do`` call.
    """

    def new_request(
        self,
        ctx: CallContext,
        url: str,
        method: str,
        query: str,
        body: Optional[Any],
    ) -> OutboundRequest:
        """Build a request.

        Args:
            ctx: Caller's cancellation context, stored on the request.
            url: Absolute endpoint URL without query string.
            method: HTTP method.
            query: Already encoded query string.
            body: JSON-serialisable body, or None.

        Returns:
            The request, ready for ``do``.
        """
        ...

    def do(self, request: OutboundRequest, response_type: Type[M]) -> M:
        """Execute the request and decode the body into ``response_type``.

        Raises:
            TransportError: On network failure or non-2xx status.
            RequestCancelledError: If the request context is cancelled.
            DecodeError: If the body does not match ``response_type``.
        """
        ...
