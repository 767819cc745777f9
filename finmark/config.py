"""Configuration management for finmark."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"

    # Development mode
    dev_mode: bool = True

    # Upload limits
    max_upload_mb: int = 20

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # LOG_LEVEL and log_level both work
        extra="ignore",  # Ignore extra environment variables
    )

    @property
    def max_upload_bytes(self) -> int:
        """Upload size limit in bytes."""
        return self.max_upload_mb * 1024 * 1024

    def log_config(self) -> None:
        """Log current configuration."""
        import os

        env_file_path = os.path.join(os.getcwd(), ".env")

        print("\n" + "=" * 60)
        print("CONFIGURATION LOADED")
        print("=" * 60)
        print(f"Working Directory:   {os.getcwd()}")
        print(f".env file exists:    {os.path.exists(env_file_path)}")
        print("-" * 60)
        print(f"Log Level:           {self.log_level}")
        print(f"Dev Mode:            {self.dev_mode}")
        print(f"Max Upload:          {self.max_upload_mb} MB")
        print(f"API Host:            {self.api_host}:{self.api_port}")
        print(f"CORS Origins:        {', '.join(self.cors_origins)}")
        print("=" * 60 + "\n")


# Global settings instance
settings = Settings()
