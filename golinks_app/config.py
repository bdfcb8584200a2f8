from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

# Discord accepts at most 25 choices per option
MAX_DOMAIN_CHOICES = 25


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Go Links"
    app_version: str = "1.0.0"

    # Admin API server
    host: str = "127.0.0.1"
    port: int = 8000
    access_key: str = ""  # Bearer key for /api/v1, empty disables the API

    # Discord
    discord_bot_token: str = ""
    discord_guild_id: Optional[int] = None  # Sync commands to one guild instantly

    # Short-links
    # Comma separated; the first entry is the default choice
    allowed_domains: str = "go.example.org"
    autocomplete_limit: int = 25  # Discord rejects more than 25 choices

    # Key-value store settings
    kv_backend: str = "redis"  # Options: "redis", "memory"
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "short_links:"

    # Audit log webhook (Discord webhook URL)
    internal_logs_webhook: Optional[str] = None
    webhook_timeout: float = 5.0  # Seconds

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("allowed_domains")
    @classmethod
    def check_allowed_domains(cls, value: str) -> str:
        # Each domain becomes a slash command choice
        count = len([d for d in value.split(",") if d.strip()])
        if count > MAX_DOMAIN_CHOICES:
            raise ValueError(f"At most {MAX_DOMAIN_CHOICES} allowed domains are supported, got {count}")
        return value

    @property
    def domain_allowlist(self) -> List[str]:
        """Allowed short-link domains, in declaration order"""
        return [d.strip() for d in self.allowed_domains.split(",") if d.strip()]


# Create settings instance
settings = Settings()
