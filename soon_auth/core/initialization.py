"""Application initialization and setup.

This module handles the initialization tasks required before the application starts:
environment variable loading and logging configuration.
"""

from dotenv import load_dotenv

from soon_auth.core.logging import configure_from_settings


def initialize_application() -> None:
    """Initialize the application with all necessary setup tasks.

    This function performs the following initialization tasks:
    1. Load environment variables from ``.env`` into the process environment
    2. Configure logging
    """
    load_dotenv()
    configure_from_settings()
