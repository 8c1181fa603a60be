"""requests-based transport adapter.

Implements ClientPort on top of a requests.Session:
- API key added as a query parameter at send time, never stored on the request
- Exchange runs on a worker thread so cancel() returns control at once
- Body streamed in chunks so a cancelled context stops the read
- Non-2xx responses decoded as the service's error envelope
- One attempt per call, no retries
"""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type, TypeVar
from urllib.parse import quote, urlsplit

import requests

from ...config import HereConfig, TransportConfig, get_config
from ...domain.context import CallContext
from ...domain.errors import (
    DecodeError,
    HereServiceError,
    RequestCancelledError,
    TransportError,
)
from ...domain.response import HereErrorResponse, WireModel, decode_response
from ...ports.transport import OutboundRequest

M = TypeVar("M", bound=WireModel)

REDACTED = "REDACTED"


def _close_late_response(future: Future) -> None:
    """Release the connection of a response nobody is waiting for."""
    if future.cancelled() or future.exception() is not None:
        return
    future.result().close()


@dataclass
class RequestsClient:
    """HTTP transport for the HERE APIs.

    Attributes:
        here: Endpoint and credential configuration
        config: Transport configuration
        session: Session used for all requests
    """

    here: HereConfig = field(default_factory=lambda: get_config().here)
    config: TransportConfig = field(default_factory=lambda: get_config().transport)
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)
    _executor: ThreadPoolExecutor = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="here-routing",
        )

    def close(self, wait: bool = False) -> None:
        """Stop the worker threads and close the session.

        With ``wait`` set, block until abandoned requests have finished.
        """
        self._executor.shutdown(wait=wait)
        self.session.close()

    def new_request(
        self,
        ctx: CallContext,
        url: str,
        method: str,
        query: str,
        body: Optional[Any],
    ) -> OutboundRequest:
        """Build a request bound to ``ctx``.

        The API key is not part of the returned URL. do() adds it when the
        request is sent.

        Raises:
            ValueError: If ``url`` is not absolute or ``body`` is not
                JSON-serialisable.
        """
        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"request URL must be absolute: {url!r}")

        headers: Dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        }
        encoded: Optional[bytes] = None
        if body is not None:
            encoded = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        return OutboundRequest(
            ctx=ctx,
            method=method.upper(),
            url=f"{url}?{query}" if query else url,
            headers=headers,
            body=encoded,
        )

    def _auth_params(self) -> Dict[str, str]:
        if self.here.api_key is None:
            return {}
        return {"apiKey": self.here.api_key.get_secret_value()}

    def _redact(self, text: str) -> str:
        if self.here.api_key is None:
            return text
        secret = self.here.api_key.get_secret_value()
        if not secret:
            return text
        return text.replace(quote(secret, safe=""), REDACTED).replace(secret, REDACTED)

    def _timeout(self, ctx: CallContext) -> float:
        remaining = ctx.remaining()
        if remaining is None:
            return self.config.timeout_seconds
        return min(self.config.timeout_seconds, remaining)

    def _send(self, request: OutboundRequest) -> requests.Response:
        return self.session.request(
            request.method,
            request.url,
            params=self._auth_params(),
            headers=dict(request.headers),
            data=request.body,
            timeout=self._timeout(request.ctx),
            stream=True,
        )

    def _await(self, request: OutboundRequest) -> requests.Response:
        """Wait for the send to finish, the context to be cancelled, or the deadline."""
        ctx = request.ctx
        future = self._executor.submit(self._send, request)

        wake = threading.Event()
        future.add_done_callback(lambda _: wake.set())
        unregister = ctx.on_cancel(wake.set)
        try:
            wake.wait(ctx.remaining())
        finally:
            unregister()

        if not future.done():
            if not future.cancel():
                future.add_done_callback(_close_late_response)
            self._logger.debug(
                "Request abandoned",
                extra={"url": request.url, "deadline_exceeded": ctx.expired},
            )
            ctx.raise_if_cancelled(request.url)

        return future.result()

    def _failure(
        self,
        message: str,
        error: Exception,
        request: OutboundRequest,
        status_code: Optional[int] = None,
    ) -> TransportError:
        detail = self._redact(str(error))
        reason = request.ctx.reason
        if reason is not None:
            return RequestCancelledError(
                f"request {reason}: {detail}",
                status_code=status_code,
                url=request.url,
                reason=reason,
            )
        return TransportError(f"{message}: {detail}", status_code=status_code, url=request.url)

    def _read_body(self, response: requests.Response, request: OutboundRequest) -> bytes:
        chunks = []
        unregister = request.ctx.on_cancel(response.close)
        try:
            for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                request.ctx.raise_if_cancelled(request.url)
                chunks.append(chunk)
        finally:
            unregister()
        return b"".join(chunks)

    def _service_error(self, response: requests.Response, body: bytes, url: str) -> TransportError:
        status = response.status_code
        try:
            envelope = decode_response(HereErrorResponse, body)
        except DecodeError:
            envelope = None

        if envelope is None or not (envelope.title or envelope.code):
            return TransportError(
                f"unexpected status {status} {response.reason or ''}".strip(),
                status_code=status,
                url=url,
            )
        return HereServiceError(
            f"{envelope.title} ({envelope.code})" if envelope.code else envelope.title,
            status_code=status,
            url=url,
            response=envelope,
        )

    def do(self, request: OutboundRequest, response_type: Type[M]) -> M:
        """Execute ``request`` and decode the body into ``response_type``.

        Cancelling the request's context while the exchange is in flight
        returns control immediately. A response that arrives afterwards is
        closed and discarded.

        Raises:
            RequestCancelledError: If the context is cancelled or expires.
            HereServiceError: Non-2xx response carrying the error envelope.
            TransportError: Any other network or status failure.
            DecodeError: If a 2xx body does not match ``response_type``.
        """
        ctx = request.ctx
        ctx.raise_if_cancelled(request.url)

        try:
            response = self._await(request)
        except requests.Timeout as e:
            raise self._failure("request timed out", e, request) from e
        except requests.RequestException as e:
            raise self._failure("request failed", e, request) from e

        try:
            try:
                body = self._read_body(response, request)
            except RequestCancelledError:
                raise
            except Exception as e:
                if ctx.cancelled or isinstance(e, requests.RequestException):
                    raise self._failure(
                        "failed reading response body",
                        e,
                        request,
                        status_code=response.status_code,
                    ) from e
                raise
        finally:
            response.close()

        self._logger.debug(
            "Response received",
            extra={
                "status": response.status_code,
                "bytes": len(body),
                "url": request.url,
            },
        )

        if not response.ok:
            error = self._service_error(response, body, request.url)
            self._logger.warning(
                "Request rejected",
                extra={"status": response.status_code, "error": str(error)},
            )
            raise error

        return decode_response(response_type, body)
