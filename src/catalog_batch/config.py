"""
Configuration settings for the catalog batch client
"""
import os
import logging
from typing import Optional
from urllib.parse import urlparse
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_BASE_URL = "https://graph.facebook.com"

class ConfigurationError(Exception):
    """Raised when configuration is invalid or incomplete"""
    pass

class Config:
    """Catalog API configuration"""

    def __init__(self):
        # API endpoint
        self.graph_base_url = os.getenv('CATALOG_GRAPH_BASE_URL') or DEFAULT_GRAPH_BASE_URL

        # Defaults for BatchClient.from_env
        self.api_version = os.getenv('CATALOG_API_VERSION', '')
        self.catalog_id = os.getenv('CATALOG_ID', '')

    def validate(self):
        """Validate the endpoint configuration"""
        parsed = urlparse(self.graph_base_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ConfigurationError(f"CATALOG_GRAPH_BASE_URL is not an http(s) URL: {self.graph_base_url}")

    def validate_target(self):
        """Validate that a default catalog target is configured"""
        self.validate()
        if not self.api_version:
            raise ConfigurationError("CATALOG_API_VERSION not set")
        if not self.catalog_id:
            raise ConfigurationError("CATALOG_ID not set")

# Global configuration instance
_config: Optional[Config] = None

def get_config() -> Config:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = Config()
        logger.debug(f"Loaded catalog config, base URL {_config.graph_base_url}")
    return _config
