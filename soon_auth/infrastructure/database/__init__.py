from .database import (
    SessionFactory,
    check_database_health,
    create_db_and_tables,
    create_engine,
    create_session_factory,
)

__all__ = [
    "SessionFactory",
    "check_database_health",
    "create_db_and_tables",
    "create_engine",
    "create_session_factory",
]
