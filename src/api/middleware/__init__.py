"""Middlewares HTTP do gateway."""

from api.middleware.correlation import CorrelationIdMiddleware
from api.middleware.rate_limit import RateLimitMiddleware

__all__ = ["CorrelationIdMiddleware", "RateLimitMiddleware"]
