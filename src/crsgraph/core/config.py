"""
Configuration settings for the crsgraph library.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library settings with environment variable support.

    Attributes:
        environment: Deployment environment, controls default log formatting
        log_level: Explicit log level name, or None to derive it from environment
        json_logs: Whether file logs are written as JSON records
        log_file: Optional path of a rotating log file
        discovery_strategy: Graph search used when no direct conversion exists
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="CRSGRAPH_",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    # Logging
    log_level: Optional[str] = None
    json_logs: bool = False
    log_file: Optional[Path] = None

    # Conversion discovery
    discovery_strategy: Literal["depth_first", "breadth_first"] = "depth_first"

    @property
    def effective_log_level(self) -> str:
        """Log level name after applying the environment default."""
        if self.log_level:
            return self.log_level.upper()
        return "DEBUG" if self.environment == "development" else "INFO"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
