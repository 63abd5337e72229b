from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class CloudinaryConfig(BaseModel):
    """Credentials forwarded to every Cloudinary call.

    Values are not validated here; a missing credential surfaces as a provider
    error when the first call is made.
    """

    cloud_name: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None

    model_config = {"frozen": True}

    def as_options(self) -> dict[str, Any]:
        """Return the non-empty credentials as Cloudinary per-call options."""

        return {key: value for key, value in self.model_dump().items() if value}


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    # Cloudinary
    cloudinary_cloud_name: Optional[str] = Field(default=None, description="Cloudinary account name")
    cloudinary_api_key: Optional[str] = Field(default=None)
    cloudinary_api_secret: Optional[str] = Field(default=None)

    # Media
    media_upload_folder: str = Field("test", description="Destination folder for uploaded assets.")
    media_max_results: int = Field(500, ge=1, description="Largest page size accepted for searches.")

    # Logging
    log_level: str = Field("INFO")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def cloudinary(self) -> CloudinaryConfig:
        return CloudinaryConfig(
            cloud_name=self.cloudinary_cloud_name,
            api_key=self.cloudinary_api_key,
            api_secret=self.cloudinary_api_secret,
        )


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
