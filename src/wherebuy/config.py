"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="WHEREBUY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Wherebuy API"
    api_prefix: str = "/api"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Appwrite configuration
    appwrite_endpoint: Optional[str] = Field(
        default=None,
        description="Appwrite API endpoint (e.g., https://cloud.appwrite.io/v1).",
    )
    appwrite_project_id: Optional[str] = Field(default=None, description="Appwrite project ID.")
    appwrite_api_key: Optional[str] = Field(
        default=None,
        description="Server API key with Database and Users scopes.",
    )
    database_id: Optional[str] = Field(
        default=None,
        description="Database holding the locations collection. Created by wherebuy-init when unset.",
    )
    locations_collection_id: Optional[str] = Field(
        default=None,
        description="Collection ID for shared shopping locations.",
    )

    session_cookie_name: str = "wherebuy_session"
    list_limit: int = Field(default=100, ge=1, le=5000, description="Locations loaded by the board.")

    # wherebuy-init pacing
    provision_pace_seconds: float = Field(default=0.5, ge=0.0)
    provision_settle_seconds: float = Field(default=5.0, ge=0.0)

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        # Return empty tuple if value is None or empty
        return tuple()

    @property
    def appwrite_configured(self) -> bool:
        return bool(self.appwrite_endpoint and self.appwrite_project_id)


settings = Settings()
