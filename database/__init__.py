"""Database module for managing connections to PostgreSQL.

This module handles:
- Database connection pool initialization
- Schema management
- Connection lifecycle

The pool is process-wide state owned by the API lifespan. Request handlers
receive it through the get_pool dependency and acquire a connection per call.
"""

import logging
import ssl
from typing import Optional, Dict, Any
import backoff
import asyncpg
from urllib.parse import urlparse, parse_qs

from .exceptions import DatabaseError, DatabaseSchemaError
from .lib.schema_manager import SchemaManager

logger = logging.getLogger(__name__)

_pool: Optional[asyncpg.Pool] = None

def _get_ssl_context() -> ssl.SSLContext:
    """Create SSL context for managed PostgreSQL connections."""
    ssl_context = ssl.create_default_context()
    ssl_context.verify_mode = ssl.CERT_REQUIRED
    ssl_context.check_hostname = True
    return ssl_context

def _get_connection_kwargs(db_url: str) -> Dict[str, Any]:
    """Get connection kwargs from database URL.

    Args:
        db_url: Database connection URL

    Returns:
        Dict of connection parameters
    """
    parsed = urlparse(db_url)
    params = parse_qs(parsed.query)

    kwargs: Dict[str, Any] = {
        'server_settings': {
            'statement_timeout': '30000',  # 30 seconds
        }
    }

    sslmode = params.get('sslmode', ['prefer'])[0]
    if sslmode in ('require', 'verify-ca', 'verify-full'):
        kwargs['ssl'] = _get_ssl_context()

    return kwargs

@backoff.on_exception(
    backoff.expo,
    (asyncpg.exceptions.PostgresConnectionError, asyncpg.exceptions.CannotConnectNowError, OSError),
    max_tries=5
)
async def _create_pool(url: str) -> asyncpg.Pool:
    conn_kwargs = _get_connection_kwargs(url)
    return await asyncpg.create_pool(
        url,
        min_size=2,          # Minimum idle connections
        max_size=20,         # Maximum connections
        max_queries=10000,   # Reset connection after this many queries
        max_inactive_connection_lifetime=300.0,  # 5 minutes
        command_timeout=60.0,  # 1 minute command timeout
        **conn_kwargs
    )

async def init_db(db_url: Optional[str] = None, create_schema: bool = False) -> None:
    """Initialize the database connection pool and optionally the schema.

    Args:
        db_url: Optional database URL. If not provided, will use settings.
        create_schema: If True, apply the versioned schema after connecting

    Raises:
        ValueError: If database URL is not provided
        DatabaseError: If the pool cannot be created after retries
    """
    global _pool

    # Import here to avoid circular imports
    from config import settings_conf

    url = db_url or settings_conf.get('db_url')
    if not url:
        raise ValueError("Database URL not provided")

    try:
        _pool = await _create_pool(url)
    except (asyncpg.exceptions.PostgresError, OSError) as e:
        logger.error(f"Database initialization failed: {e}")
        raise DatabaseError(f"Failed to connect to database: {e}")

    logger.info("Database pool initialized")

    if create_schema:
        await SchemaManager(_pool).initialize()

async def get_pool() -> asyncpg.Pool:
    """Get the database connection pool.

    Returns:
        The connection pool

    Raises:
        RuntimeError: If pool hasn't been initialized
    """
    if not _pool:
        await init_db()
    if not _pool:
        raise RuntimeError("Failed to initialize database pool")
    return _pool

async def close() -> None:
    """Close the database connection pool."""
    global _pool

    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")

# Export public interface
__all__ = ['init_db', 'get_pool', 'close', 'DatabaseError', 'DatabaseSchemaError']
