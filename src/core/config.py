"""
Core configuration module for the placement optimizer service.

This module manages application settings using Pydantic Settings,
providing type-safe configuration with environment variable support.
"""

from typing import Annotated, List, Dict, Any
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = "Energy-Aware Placement Optimizer"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # API settings
    api_v1_prefix: str = "/api/v1"
    api_docs_url: str = "/api/docs"
    api_redoc_url: str = "/api/redoc"
    api_openapi_url: str = "/api/openapi.json"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000

    # Logfire settings
    logfire_token: str = ""
    logfire_service_name: str = "placement-optimizer"
    logfire_environment: str = "development"
    logfire_console: bool = False

    # CORS settings
    cors_origins: Annotated[List[str], NoDecode] = Field(default=["*"])

    # Optimization request limits
    max_units_per_request: int = Field(default=2000, ge=1)
    max_nodes_per_request: int = Field(default=500, ge=1)
    max_generations_per_request: int = Field(default=1000, ge=0)
    max_population_per_request: int = Field(default=5000, ge=1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    def get_logfire_settings(self) -> Dict[str, Any]:
        """Get Logfire configuration."""
        return {
            "token": self.logfire_token or None,
            "service_name": self.logfire_service_name,
            "environment": self.logfire_environment,
            "send_to_logfire": "if-token-present",
            "console": None if self.logfire_console else False,
        }

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


# Create global settings instance
settings = Settings()
