"""Services layer - Request/response adapters.

Available services:
- RoutingService: Route calculation between two points
- MatrixService: Matrix calculation over origin/destination sets
"""

from .matrix_service import MatrixService
from .routing_service import RoutingService

__all__ = ["RoutingService", "MatrixService"]
