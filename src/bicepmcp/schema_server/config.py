"""Configuration management for the Bicep schema server."""

import os
from dataclasses import dataclass

DEFAULT_TYPES_BASE_URL = "https://raw.githubusercontent.com/Azure/bicep-types-az/refs/heads/main/generated"


@dataclass
class SchemaServerConfig:
    """Configuration class for the Bicep schema server."""

    # MCP Server Configuration
    server_name: str = "bicep-schema"

    # Type Store Configuration
    types_base_url: str = DEFAULT_TYPES_BASE_URL
    request_timeout: float = 30.0  # seconds

    # Cache Configuration
    cache_ttl: int = 86400  # 24 hours
    cache_max_size: int = 4096
    file_cache_enabled: bool = True

    # Runtime Configuration
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "SchemaServerConfig":
        """Create configuration from environment variables."""
        return cls(
            server_name=os.getenv("BICEP_SCHEMA_SERVER_NAME", "bicep-schema"),
            types_base_url=os.getenv("BICEP_TYPES_BASE_URL", DEFAULT_TYPES_BASE_URL).rstrip("/"),
            request_timeout=float(os.getenv("BICEP_TYPES_REQUEST_TIMEOUT", "30")),
            cache_ttl=int(os.getenv("BICEP_TYPES_CACHE_TTL", "86400")),
            cache_max_size=int(os.getenv("BICEP_TYPES_CACHE_MAX_SIZE", "4096")),
            file_cache_enabled=os.getenv("BICEP_TYPES_FILE_CACHE", "true").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> tuple[bool, list[str]]:
        """Validate configuration settings."""
        errors = []

        if not self.types_base_url:
            errors.append("types_base_url cannot be empty")
        elif not self.types_base_url.startswith(("http://", "https://")):
            errors.append("types_base_url must be an http(s) URL")

        if self.request_timeout <= 0:
            errors.append("request_timeout must be positive")

        if self.cache_ttl <= 0:
            errors.append("cache_ttl must be positive")

        if self.cache_max_size <= 0:
            errors.append("cache_max_size must be positive")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_log_levels:
            errors.append(f"log_level must be one of {valid_log_levels}")

        return len(errors) == 0, errors

    def __post_init__(self):
        """Post-initialization validation."""
        is_valid, errors = self.validate()
        if not is_valid:
            raise ValueError(f"Invalid configuration: {', '.join(errors)}")


# Global configuration instance
_config: SchemaServerConfig | None = None


def get_config() -> SchemaServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = SchemaServerConfig.from_environment()
    return _config


def set_config(config: SchemaServerConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
