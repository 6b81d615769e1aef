"""Main application settings and configuration management.

This module composes all the application settings from the different modules
(app, database, auth, identity provider) into a single, accessible `Settings`
class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object for use throughout the application.

Environment Support:
- Development: Uses .env, provider credentials not required
- Test: Uses .env.test, provider credentials not required
- Staging: Uses .env.staging, provider credentials required
- Production: Uses .env.production, provider credentials required
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .identity_provider import IdentityProviderSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)


class Settings(AppSettings, DatabaseSettings, AuthSettings, IdentityProviderSettings):
    """The main settings class that aggregates all application configurations.

    It inherits from all the specialized settings classes, providing a unified
    interface to all configuration parameters.

    Usage:
        - Access settings via the singleton instance `settings` throughout the
          application, except for the registration policy, which is passed
          explicitly into the services at construction time.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def validate_required_fields(self) -> None:
        """Validates that the provider credentials are set outside development.

        Raises:
            ValueError: If required fields are missing in staging or production.
        """
        required_fields = {
            "IDENTITY_PROVIDER_PROJECT_ID": self.IDENTITY_PROVIDER_PROJECT_ID,
            "IDENTITY_PROVIDER_API_KEY": self.IDENTITY_PROVIDER_API_KEY.get_secret_value(),
        }
        missing_fields = [name for name, value in required_fields.items() if not value]
        if not missing_fields:
            logger.info("All required environment variables are set.")
            return

        error_msg = f"Missing required environment variables: {', '.join(missing_fields)}"
        if self.APP_ENV in ("development", "test"):
            logger.warning(f"{self.APP_ENV} mode: {error_msg}")
            return
        logger.error(error_msg)
        raise ValueError(error_msg)


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production",
    }
    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info(f"Loading environment configuration from {env_file}")
        return Settings(_env_file=env_file)
    if Path(".env").exists():
        logger.info(f"Loading environment configuration from .env (environment: {env})")
    else:
        logger.info(f"No .env file found, using environment variables only (environment: {env})")
    return Settings()


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
settings.validate_required_fields()
