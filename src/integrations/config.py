"""
External API Configuration

Configuration and factory functions for the research providers.
Loads credentials from settings / environment variables.

Environment variables:
- BRIGHT_DATA_API_TOKEN: Bright Data API token (search, scrape, social profiles)
- PERPLEXITY_API_KEY: Perplexity API key (researcher model)

Optional:
- RESEARCHER_MODEL: Perplexity model to use (default: sonar-reasoning-pro)
- BRIGHT_DATA_ENABLED: Enable Bright Data (default: true)
- PERPLEXITY_ENABLED: Enable Perplexity (default: true)
"""

import os
import logging
from typing import Optional

from src.utils.config import Settings, get_settings

from .brightdata import BrightDataClient
from .perplexity import PerplexityClient

logger = logging.getLogger(__name__)


def get_env_bool(key: str, default: bool = True) -> bool:
    """Get boolean from environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("false", "0", "no", "off"):
        return False
    if val in ("true", "1", "yes", "on"):
        return True
    return default


class ExternalAPIConfig:
    """Configuration for external APIs."""

    def __init__(
        self,
        bright_data_api_token: Optional[str] = None,
        perplexity_api_key: Optional[str] = None,
        perplexity_model: Optional[str] = None,
        bright_data_enabled: bool = True,
        perplexity_enabled: bool = True,
        search_timeout: float = 10.0,
        model_timeout: float = 30.0,
    ):
        """
        Initialize external API configuration.

        Args:
            bright_data_api_token: Bright Data API token (or from env)
            perplexity_api_key: Perplexity API key (or from env)
            perplexity_model: Perplexity model to use
            bright_data_enabled: Whether Bright Data is enabled
            perplexity_enabled: Whether Perplexity is enabled
            search_timeout: Per-request timeout for search/scrape calls
            model_timeout: Per-request timeout for researcher model calls
        """
        self.bright_data_api_token = bright_data_api_token or os.environ.get("BRIGHT_DATA_API_TOKEN")
        self.perplexity_api_key = perplexity_api_key or os.environ.get("PERPLEXITY_API_KEY")
        self.perplexity_model = perplexity_model or os.environ.get("RESEARCHER_MODEL", "sonar-reasoning-pro")
        self.bright_data_enabled = bright_data_enabled and get_env_bool("BRIGHT_DATA_ENABLED", True)
        self.perplexity_enabled = perplexity_enabled and get_env_bool("PERPLEXITY_ENABLED", True)
        self.search_timeout = search_timeout
        self.model_timeout = model_timeout

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ExternalAPIConfig":
        """Build from application settings."""
        settings = settings or get_settings()
        return cls(
            bright_data_api_token=settings.BRIGHT_DATA_API_TOKEN,
            perplexity_api_key=settings.PERPLEXITY_API_KEY,
            perplexity_model=settings.RESEARCHER_MODEL,
            search_timeout=settings.SEARCH_TIMEOUT,
            model_timeout=settings.MODEL_TIMEOUT,
        )

    @property
    def has_bright_data(self) -> bool:
        """Check if Bright Data is configured and enabled."""
        return self.bright_data_enabled and bool(self.bright_data_api_token)

    @property
    def has_perplexity(self) -> bool:
        """Check if Perplexity is configured and enabled."""
        return self.perplexity_enabled and bool(self.perplexity_api_key)

    def log_status(self):
        """Log configuration status."""
        logger.info(
            f"External API status: "
            f"BrightData={'enabled' if self.has_bright_data else 'disabled'}, "
            f"Perplexity={'enabled' if self.has_perplexity else 'disabled'}"
        )


class ExternalAPIClients:
    """
    Factory and manager for external API clients.

    Usage:
        config = ExternalAPIConfig.from_settings()
        clients = ExternalAPIClients(config)

        if clients.bright_data:
            serp = await clients.bright_data.search("...")

        await clients.close()
    """

    def __init__(self, config: Optional[ExternalAPIConfig] = None):
        """
        Initialize external API clients.

        Args:
            config: API configuration (defaults to env-based config)
        """
        self.config = config or ExternalAPIConfig()
        self._bright_data: Optional[BrightDataClient] = None
        self._perplexity: Optional[PerplexityClient] = None

    @property
    def bright_data(self) -> Optional[BrightDataClient]:
        """Get or create Bright Data client."""
        if not self.config.has_bright_data:
            return None

        if self._bright_data is None:
            self._bright_data = BrightDataClient(
                api_token=self.config.bright_data_api_token,
                timeout=self.config.search_timeout,
            )
            logger.info("Initialized Bright Data client")

        return self._bright_data

    @property
    def perplexity(self) -> Optional[PerplexityClient]:
        """Get or create Perplexity client."""
        if not self.config.has_perplexity:
            return None

        if self._perplexity is None:
            self._perplexity = PerplexityClient(
                api_key=self.config.perplexity_api_key,
                default_model=self.config.perplexity_model,
                timeout=self.config.model_timeout,
            )
            logger.info("Initialized Perplexity client")

        return self._perplexity

    async def close(self):
        """Close all clients."""
        if self._bright_data:
            await self._bright_data.close()
            self._bright_data = None

        if self._perplexity:
            await self._perplexity.close()
            self._perplexity = None

        logger.info("Closed external API clients")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
