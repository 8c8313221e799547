"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LENDING_CLUB_",
        extra="ignore",
    )

    # Service
    service_name: str = "lending-club"
    log_level: str = "INFO"

    # Lending rules
    listing_bonus: float = 100.0  # Credits granted to an owner per listed item
    start_day: int = 0

    # Demo data
    seed_demo: bool = False
    demo_opening_credits: float = 700.0


settings = Settings()
