"""Configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class APIConfig(BaseModel):
    """Remote API configuration."""

    endpoint: str = Field(default="https://dummyjson.com")
    timeout: float = Field(default=30.0, gt=0)


class StorageConfig(BaseModel):
    """Local store configuration."""

    db_path: str | None = Field(
        default=None,
        description="Store file path; None uses the platform data directory",
    )

    @field_validator("db_path")
    @classmethod
    def _blank_is_default(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


class AppConfig(BaseModel):
    """Main application configuration."""

    api: APIConfig = Field(default_factory=APIConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    import_on_first_launch: bool = Field(default=True)
