"""Shared fixtures: an in-memory ClientPort returning canned bodies."""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import pytest

from here_routing.config import reset_config
from here_routing.container import reset_container
from here_routing.domain.response import decode_response
from here_routing.ports.transport import OutboundRequest


@dataclass
class FakeClient:
    """ClientPort double recording every call.

    Attributes:
        body: Canned response body (str, bytes or mapping)
        error: Raised from do() instead of decoding
        new_request_error: Raised from new_request()
        on_do: Hook run at the start of do(), e.g. to cancel the context
    """

    body: Any = None
    error: Optional[Exception] = None
    new_request_error: Optional[Exception] = None
    on_do: Optional[Callable[[OutboundRequest], None]] = None

    new_request_calls: List[dict] = field(default_factory=list)
    do_calls: List[OutboundRequest] = field(default_factory=list)

    def new_request(self, ctx, url, method, query, body):
        self.new_request_calls.append(
            {"ctx": ctx, "url": url, "method": method, "query": query, "body": body}
        )
        if self.new_request_error is not None:
            raise self.new_request_error
        return OutboundRequest(
            ctx=ctx,
            method=method,
            url=f"{url}?{query}" if query else url,
            body=json.dumps(body).encode("utf-8") if body is not None else None,
        )

    def do(self, request, response_type):
        self.do_calls.append(request)
        if self.on_do is not None:
            self.on_do(request)
        if self.error is not None:
            raise self.error
        return decode_response(response_type, self.body)

    @property
    def called(self) -> bool:
        return bool(self.new_request_calls or self.do_calls)


@pytest.fixture
def fake_client():
    """Factory for FakeClient instances."""

    def _make(**kwargs) -> FakeClient:
        return FakeClient(**kwargs)

    return _make


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Isolate tests from HERE_* variables in the developer's environment."""
    for key in list(os.environ):
        if key.startswith("HERE_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()
