"""Database configuration re-exports"""

from src.platform.database.orm_db_setting import AsyncEngineManager, Base, Database

__all__ = [
    'AsyncEngineManager',
    'Base',
    'Database',
]
