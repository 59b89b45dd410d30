"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Plot store API Configuration
    store_api_base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL for the plot/plant store API"
    )
    store_api_key: str = Field(
        default="",
        description="API key for authentication against the store"
    )
    store_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for a single store request"
    )
    
    # Retry Configuration
    max_retry_attempts: int = Field(
        default=3,
        description="Maximum number of retry attempts for store calls"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=4,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=10,
        description="Maximum wait time in seconds between retries"
    )
    
    # Propagation risk thresholds (infected / total plants)
    risk_critical_ratio: float = Field(
        default=0.30,
        description="Infection ratio above which a cluster is critical"
    )
    risk_high_ratio: float = Field(
        default=0.15,
        description="Infection ratio above which a cluster is high risk"
    )
    risk_medium_ratio: float = Field(
        default=0.05,
        description="Infection ratio above which a cluster is medium risk"
    )
    
    # Batch analysis
    max_concurrent_plot_analyses: int = Field(
        default=8,
        description="Maximum plots analyzed concurrently for a farm"
    )
    
    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    
    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )
    
    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )
    
    # Application Settings
    app_name: str = Field(
        default="CropGuard Propagation Service",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )
    
    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
