"""
Middleware components for request processing.
"""

from aggie_nexus.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
