"""
Configuration settings for nfhl_util.
"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Attributes:
        hazards_portal_url: Base URL of the NFHL county search portal
        msc_portal_url: Base URL of FEMA's Map Service Center portal
        request_timeout: HTTP timeout in seconds
        user_agent: User-Agent header sent to FEMA
        cache_dir: Default download cache directory
        log_level: Default log level when none is given on the command line
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="NFHL_UTIL_",
    )

    # FEMA endpoints
    hazards_portal_url: str = "https://hazards.fema.gov/femaportal/NFHL/"
    msc_portal_url: str = "https://msc.fema.gov/portal/"

    # HTTP settings
    request_timeout: float = 120.0
    user_agent: str = "nfhl_util/0.1.0"

    # Download cache
    cache_dir: Path = Path("./nfhl_cache")

    # Logging
    log_level: str = "INFO"

    # Environment
    environment: Literal["development", "production"] = "production"

    @property
    def county_search_url(self) -> str:
        """URL of the NFHL county search result table."""
        return self.hazards_portal_url.rstrip("/") + "/searchResult"

    @property
    def msc_search_url(self) -> str:
        """URL of the MSC advanced search form."""
        return self.msc_portal_url.rstrip("/") + "/advanceSearch"

    @property
    def msc_download_url(self) -> str:
        """URL of the MSC product download servlet."""
        return self.msc_portal_url.rstrip("/") + "/downloadProduct"


# Global settings instance
settings = Settings()
