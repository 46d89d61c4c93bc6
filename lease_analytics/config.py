"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="LEASE_ANALYTICS_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Service
    service_name: str = "lease-analytics"
    log_level: str = "INFO"

    # Validation tolerances
    totals_tolerance: float = 1.0  # currency units
    percentage_tolerance: float = 0.5  # percentage points
    reconciliation_threshold_pct: float = 5.0

    # Executive summary
    executive_summary_max_items: int = 8
    max_priorities: int = 3

    # Formatting
    currency_label: str = "Kc"


settings = Settings()
