"""
Configuration settings for the Shipment Tracking Backend.

This module handles application configuration using Pydantic settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""
    
    # Application
    app_name: str = "Shipment Tracking API"
    api_version: str = "v1"
    debug: bool = False
    
    # Logging
    log_level: str = "INFO"
    
    # In-memory store: number of independently locked shards
    store_shard_count: int = Field(default=16, ge=1)
    
    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
