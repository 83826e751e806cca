from .connection import DatabaseManager, TestDatabaseManager, get_database_manager, get_db_session

__all__ = ["DatabaseManager", "TestDatabaseManager", "get_database_manager", "get_db_session"]
