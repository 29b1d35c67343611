"""
Game Balance Analytics
Centralized Configuration Management

Configuration is loaded with Pydantic settings from environment variables
(and an optional .env file). The filter toggles of a dashboard render are not
settings: they arrive per call as FilterOptions.
"""

from functools import lru_cache
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from game_balance.models.events import MAX_LEVEL


class AnalyticsSettings(BaseSettings):
    """Stage analytics configuration"""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    max_level: int = Field(default=MAX_LEVEL, ge=1, description="Highest level inside a stage")
    spike_fail_rate_threshold: float = Field(default=20.0, description="Fail rate (%) above which a level may be a spike")
    spike_increase_threshold: float = Field(default=10.0, description="Fail rate increase (points) over the previous level")
    critical_drop_rate_threshold: float = Field(default=15.0, description="Drop rate (%) marking a critical funnel level")


class TutorialSettings(BaseSettings):
    """Tutorial funnel configuration"""

    model_config = SettingsConfigDict(env_prefix="TUTORIAL_")

    data_dir: str = Field(default="./data/tutorial", description="Directory of tutorial CSV exports")
    text_steps: List[str] = Field(
        default=["01", "02", "03", "23", "37", "61"],
        description="Text-tap steps left out of the funnel",
    )
    special_steps: List[str] = Field(default=["63"], description="Out-of-flow steps left out of the funnel")
    max_dropoff_rate: float = Field(default=95.0, description="Drop-off rate treated as a logging gap")
    max_growth_factor: float = Field(default=10.0, description="User growth factor treated as a logging gap")
    danger_dropoff_rate: float = Field(default=10.0, description="Drop-off rate marking a dangerous step")


class IngestionSettings(BaseSettings):
    """Event log ingestion configuration"""

    model_config = SettingsConfigDict(env_prefix="INGESTION_")

    data_dir: str = Field(default="./data/events", description="Directory of event log CSV exports")
    delimiter: str = Field(default=",", description="CSV delimiter")
    encoding: str = Field(default="utf8", description="CSV encoding")
    null_values: List[str] = Field(default=[""], description="Strings read as missing values")


class MonitoringSettings(BaseSettings):
    """Logging configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="game-balance-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")
    cors_origins: List[str] = Field(default=["*"], description="Allowed CORS origins")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    tutorial: TutorialSettings = Field(default_factory=TutorialSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
