"""Exceptions raised by the DApp catalog and favorites operations."""

class DappError(Exception):
    """Base exception for catalog operations."""
    pass

class ValidationError(DappError, ValueError):
    """Raised when an identifier or numeric input is malformed.

    Always raised before any query is sent to the database.
    """
    pass

class NotFoundError(DappError, LookupError):
    """Raised when an entity, or an account with prior state, is absent."""
    pass

class DappNotFoundError(NotFoundError):
    """Raised when a DApp is not in the catalog or its details are unavailable."""
    pass
