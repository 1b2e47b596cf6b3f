"""HTTP client for the Bubble's Cafe API with CSRF token handling."""

from .api import CafeApiClient
from .csrf import CSRF_HEADER_NAME, CSRF_TOKEN_PATH, CsrfTokenHolder, CsrfTokenService

__all__ = [
    "CSRF_HEADER_NAME",
    "CSRF_TOKEN_PATH",
    "CafeApiClient",
    "CsrfTokenHolder",
    "CsrfTokenService",
]
