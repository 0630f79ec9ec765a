"""
Configuration management for the ecomm data model
"""
from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ECOMM_",
        extra="ignore",
    )

    # Database settings
    database_url: str = Field(
        default="sqlite:///ecomm.db",
        description="SQLAlchemy database URL (relative SQLite paths live in the instance folder)"
    )

    sql_echo: bool = Field(
        default=False,
        description="Echo emitted SQL through the sqlalchemy.engine logger"
    )

    install_views: bool = Field(
        default=True,
        description="Create the SQL views together with the tables"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    log_format: str = Field(
        default="simple",
        description="Log format (simple, structured)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Optional log file path"
    )

    service_name: str = Field(
        default="ecomm",
        description="Service name attached to structured log records"
    )

    def flask_config(self) -> Dict[str, Any]:
        """Flask config keys derived from these settings"""
        return {
            'SQLALCHEMY_DATABASE_URI': self.database_url,
            'SQLALCHEMY_ECHO': self.sql_echo,
            'SQLALCHEMY_TRACK_MODIFICATIONS': False,
            'ECOMM_INSTALL_VIEWS': self.install_views,
        }
