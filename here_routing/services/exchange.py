"""Single request/response exchange through a ClientPort."""

from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

from ..domain.context import CallContext
from ..domain.errors import HereRoutingError, RequestConstructionError
from ..domain.response import WireModel
from ..ports.transport import ClientPort

M = TypeVar("M", bound=WireModel)

logger = logging.getLogger(__name__)


def exchange(
    client: ClientPort,
    ctx: CallContext,
    url: str,
    method: str,
    query: str,
    body: Optional[Any],
    response_type: Type[M],
) -> M:
    """Build, send and decode one request.

    The context is checked before the request is built and again after the
    transport returns, so a cancelled call never yields a response.

    Raises:
        RequestCancelledError: If ``ctx`` is cancelled.
        RequestConstructionError: If the client cannot build the request.
        HereRoutingError: Whatever ``client.do`` raises, unchanged.
    """
    ctx.raise_if_cancelled(url)

    try:
        request = client.new_request(ctx, url, method, query, body)
    except HereRoutingError:
        raise
    except Exception as e:
        raise RequestConstructionError(
            f"unable to create {method.lower()} request",
            cause=e,
            method=method,
        ) from e

    logger.debug("Sending request", extra={"method": method, "url": url})
    response = client.do(request, response_type)

    ctx.raise_if_cancelled(url)
    return response
