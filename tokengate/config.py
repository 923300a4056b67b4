"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # "development" or "production"; anything else is treated as production
    environment: str = "development"

    database_path: str = "./data/tokengate.db"
    api_prefix: str = "/api/users"
    cors_origins: list[str] = ["http://localhost:3000"]
    port: int = 8080
    log_level: str = "INFO"

    # JWT Configuration
    # No default secret: production refuses to start without one,
    # development generates a random per-process secret.
    jwt_secret_key: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expiry_seconds: int = 3600

    # Bcrypt work factor (higher = more secure but slower)
    # For tests, use 4 for faster execution while maintaining functionality
    bcrypt_work_factor: int = 12

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"


settings = Settings()
