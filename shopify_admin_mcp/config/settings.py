"""
Configuration management for the Shopify Admin MCP server.
Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
load_dotenv(PROJECT_ROOT / ".env")


@dataclass
class ShopifyConfig:
    access_token: str = ""
    shop_domain: str = ""
    api_version: str = "2025-01"
    timeout_seconds: float = 30.0

    def __post_init__(self):
        self.access_token = os.getenv("SHOPIFY_ACCESS_TOKEN", self.access_token)
        # MYSHOPIFY_DOMAIN is what MCP hosts usually pass; keep the older name as fallback
        self.shop_domain = os.getenv(
            "MYSHOPIFY_DOMAIN", os.getenv("SHOPIFY_SHOP_DOMAIN", self.shop_domain)
        )
        self.api_version = os.getenv("SHOPIFY_API_VERSION", self.api_version)
        timeout_str = os.getenv("SHOPIFY_TIMEOUT", "")
        if timeout_str:
            self.timeout_seconds = float(timeout_str)


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_file: str = ""

    def __post_init__(self):
        self.level = os.getenv("LOG_LEVEL", self.level)
        self.log_file = os.getenv("LOG_FILE", self.log_file)


@dataclass
class ServerConfig:
    name: str = "shopify"
    version: str = "1.0.0"

    def __post_init__(self):
        self.name = os.getenv("MCP_SERVER_NAME", self.name)


@dataclass
class Settings:
    shopify: ShopifyConfig = field(default_factory=ShopifyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def validate(self) -> list[str]:
        """Validate required configuration. Returns list of missing items."""
        missing = []
        if not self.shopify.access_token:
            missing.append("SHOPIFY_ACCESS_TOKEN")
        if not self.shopify.shop_domain:
            missing.append("MYSHOPIFY_DOMAIN")
        return missing


# Global settings singleton
settings = Settings()
