"""
Configuration management using Pydantic Settings.

Environment variables:
- DATABASE_URL: SQLAlchemy database URL
- DATABASE_ECHO: Log every SQL statement emitted by the engine
- LOG_LEVEL: Root logging level (DEBUG, INFO, WARNING, ...)
- TREE_PARENT_FIELD: Name of the parent relationship on managed nodes
- TREE_LEVEL_FIELD: Name of the stored level column, empty when computed
"""
import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database Configuration
    database_url: str = Field(default="sqlite:///closure_tree.db")
    database_echo: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="INFO")

    # Tree field names
    tree_parent_field: str = Field(default="parent")
    tree_level_field: Optional[str] = Field(default=None)

    def get_tree_fields(self) -> dict:
        """Get tree field names as dictionary."""
        return {
            'parent': self.tree_parent_field,
            'level': self.tree_level_field
        }


def configure_logging(level: Optional[str] = None):
    """Configure root logging from settings."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


# Global settings instance
settings = Settings()
