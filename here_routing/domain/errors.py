"""Typed errors for the HERE routing client.

Each failure kind raised by the services and the transport adapter has its
own type, so callers can tell validation, query construction, transport,
cancellation and decode failures apart without parsing messages.

All errors inherit from HereRoutingError and can optionally
wrap a root cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .response import HereErrorResponse


@dataclass
class HereRoutingError(Exception):
    """Base error for the routing client.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class RequestValidationError(HereRoutingError):
    """The request was rejected before any network activity.

    Attributes:
        field_name: Request attribute that failed validation
    """

    field_name: str = ""


@dataclass
class QueryConstructionError(HereRoutingError):
    """The endpoint URL or query string could not be built.

    Attributes:
        url: Base URL the endpoint was resolved against
    """

    url: str = ""


@dataclass
class RequestConstructionError(HereRoutingError):
    """The transport refused to create the outbound request.

    Attributes:
        method: HTTP method of the request being built
    """

    method: str = ""


@dataclass
class TransportError(HereRoutingError):
    """Network failure or unexpected HTTP status.

    Attributes:
        status_code: HTTP status if a response was received
        url: Request URL
    """

    status_code: Optional[int] = None
    url: str = ""


@dataclass
class RequestCancelledError(TransportError):
    """The caller's context was cancelled or its deadline passed.

    Attributes:
        reason: "cancelled" or "deadline exceeded"
    """

    reason: str = "cancelled"


@dataclass
class HereServiceError(TransportError):
    """The service rejected the whole request with its error envelope.

    Attributes:
        response: The decoded error envelope
    """

    response: Optional[HereErrorResponse] = None


@dataclass
class DecodeError(HereRoutingError):
    """Response body does not match the expected model.

    Attributes:
        field_path: Dotted wire path of the offending field
        type_name: Name of the model being decoded
    """

    field_path: str = ""
    type_name: str = ""


@dataclass
class ConfigurationError(HereRoutingError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Dotted name of the first rejected setting
    """

    setting_name: str = ""
