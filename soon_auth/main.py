"""Main application entry point.

Run with ``uvicorn soon_auth.main:app``.
"""

from soon_auth.core.application import create_application
from soon_auth.core.initialization import initialize_application

# Initialize the application
initialize_application()

# Create the FastAPI application
app = create_application()
