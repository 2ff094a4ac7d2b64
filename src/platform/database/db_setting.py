"""
Database configuration entry point

Re-exports the SQLAlchemy engine/session management from orm_db_setting.py
"""

from src.platform.database.orm_db_setting import (
    Base,
    Database,
    build_async_engine,
    build_session_maker,
    create_db_and_tables,
    dispose_engine,
    get_engine,
    get_session_maker,
)

__all__ = [
    'Base',
    'Database',
    'build_async_engine',
    'build_session_maker',
    'create_db_and_tables',
    'dispose_engine',
    'get_engine',
    'get_session_maker',
]
