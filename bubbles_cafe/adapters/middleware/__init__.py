"""HTTP middlewares that load sessions and guard state-changing requests."""

from .request_guard import MUTATING_METHODS, RequestGuardMiddleware
from .session import SessionMiddleware

__all__ = ["MUTATING_METHODS", "RequestGuardMiddleware", "SessionMiddleware"]
