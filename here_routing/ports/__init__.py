"""Ports layer - Protocols for external collaborators.

Available ports:
- ClientPort: HTTP transport used by the routing and matrix services
"""

from .transport import ClientPort, OutboundRequest

__all__ = ["ClientPort", "OutboundRequest"]
