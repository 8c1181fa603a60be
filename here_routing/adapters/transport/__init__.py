"""Transport adapters - Implementations of ClientPort.

Available implementations:
- RequestsClient: requests.Session based HTTP transport
"""

from .requests_client import RequestsClient

__all__ = ["RequestsClient"]
