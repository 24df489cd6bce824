# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application settings loaded from the environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration.

    Values are read from environment variables (case-insensitive) or a
    ``.env`` file in the working directory.
    """

    app_name: str = "DealerDesk"
    database_url: str = "sqlite:///./dealerdesk.db"
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:4200"

    # Bootstrap
    seed_on_startup: bool = True
    system_corporation_name: str = "System Corporation"
    super_admin_email: str | None = None

    # Sessions are issued by the login service; expired ones are purged here
    cleanup_sessions_on_startup: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def get_cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
