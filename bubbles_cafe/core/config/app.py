"""
Service identity, logging switches and the browser-facing trust settings.
"""
from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Settings shared by the whole session service.

    The session cookie is signed with SECRET_KEY, so rotating it signs every
    browser out. ALLOWED_ORIGINS names the storefront origins that may call the
    API with credentials; a wildcard is never acceptable because the cookie
    travels on every request.
    """
    PROJECT_NAME: str = "bubbles-cafe"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    SECRET_KEY: str = Field(..., min_length=32)
    ALLOWED_ORIGINS: Union[str, List[str]] = Field(default="http://localhost:3002", validate_default=True)

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Accepts ``ALLOWED_ORIGINS=https://a,https://b`` from the environment."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v
