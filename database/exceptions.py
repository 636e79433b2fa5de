"""Database exceptions."""
import asyncpg

class DatabaseError(Exception):
    """Base exception for persistence-layer failures."""
    pass

class DatabaseSchemaError(DatabaseError):
    """Raised when schema creation or migration fails."""
    pass

# Errors from asyncpg and the socket layer that callers translate to DatabaseError
STORE_EXCEPTIONS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

__all__ = ['DatabaseError', 'DatabaseSchemaError', 'STORE_EXCEPTIONS']
