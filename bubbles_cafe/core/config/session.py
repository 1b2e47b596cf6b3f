"""
Session cookie and CSRF protection settings.
"""
from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class SessionSettings(BaseSettings):
    """
    Defines the session lifetime, cookie attributes and CSRF enforcement rules.

    Security Note:
        - SESSION_COOKIE_SECURE must be enabled in production so the session
          id never travels over plain HTTP.
        - Keep CSRF_EXEMPT_PATHS minimal; every entry is a route that accepts
          mutating requests without an anti-forgery token.
    """
    SESSION_TTL_HOURS: int = Field(ge=1, default=24)
    SESSION_COOKIE_NAME: str = "bubbles.sid"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_COOKIE_SAMESITE: str = Field(pattern="^(lax|strict|none)$", default="lax")
    SESSION_CLEANUP_INTERVAL_SECONDS: int = Field(ge=1, default=3600)

    CSRF_HEADER_NAME: str = "X-CSRF-Token"
    CSRF_EXEMPT_PATHS: Union[str, List[str]] = Field(
        default="/api/auth/login,/api/auth/register,/api/auth/forgot-password,/api/auth/reset-password",
        validate_default=True,
    )

    @field_validator("CSRF_EXEMPT_PATHS", mode="before")
    @classmethod
    def split_exempt_paths(cls, v: Union[str, List[str]]) -> List[str]:
        """Accepts a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v
