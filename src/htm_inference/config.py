"""
Configuration settings for the HTM inference layer.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # === Application ===
    APP_NAME: str = "HTM Inference Layer"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    
    # === Inference Record ===
    ANOMALY_SCORE_MIN: float = 0.0
    ANOMALY_SCORE_MAX: float = 1.0
    
    # === Learning ===
    LEARN: bool = True  # Stages update their collaborators while computing
    INFER: bool = True  # Classifiers produce predictions
    
    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
