""" Search DApps in the catalog """
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
import logging

from database import get_pool
from database.exceptions import DatabaseError, STORE_EXCEPTIONS
from .filters import QueryParams, build_or_clause, combine_and
from .parse_fields import parse_string_list
from .validators import INT8_MAX, coerce_positive_int, coerce_rating

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
DEFAULT_PAGE = 1
# Unrated DApps have no reviews_make row, so any threshold excludes them
DEFAULT_MIN_RATING = 1.0

SEARCH_COLUMNS = """
    dm.dapp_id,
    dm.name,
    dm.chains,
    dm.categories,
    dm.logo,
    dm.link,
    rm.ratings
"""

def build_search_query(
        category: Any = None,
        chain: Any = None,
        ratings: Any = None,
        name: Optional[str] = None,
        limit: Any = None,
        page: Any = None,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT
    ) -> Tuple[str, List[Any], int, int]:
    """Compose the search query and its bound parameters.

    Args:
        category: Category label(s); any of them may match
        chain: Chain label(s); any of them may match
        ratings: Minimum rating; defaults to 1 so unrated DApps are excluded
        name: Case-insensitive substring of the DApp name
        limit: Page size; invalid input falls back to the default, capped at max_limit
        page: 1-indexed page; invalid input falls back to 1, and pages whose
            offset would overflow INT8 are clamped

    Returns:
        Tuple of (query, params, limit, page)
    """
    limit = coerce_positive_int(limit, default_limit, max_limit)
    # Keeps the offset within INT8; such a page is simply past the end
    page = coerce_positive_int(page, DEFAULT_PAGE, INT8_MAX // limit)
    offset = (page - 1) * limit

    params = QueryParams()
    clauses = [
        build_or_clause('dm.categories', category, params),
        build_or_clause('dm.chains', chain, params),
        f"rm.ratings >= {params.add(Decimal(str(coerce_rating(ratings, DEFAULT_MIN_RATING))))}"
    ]

    if name and name.strip():
        clauses.append(f"dm.name ILIKE {params.add(_like_pattern(name.strip()))}")

    query = f"""
        SELECT {SEARCH_COLUMNS}
        FROM dapps_main dm
        LEFT JOIN reviews_make rm ON dm.dapp_id = rm.dapp_id
        {combine_and(clauses)}
        ORDER BY rm.ratings DESC, dm.dapp_id ASC
        LIMIT {params.add(limit)} OFFSET {params.add(offset)}
    """
    return query, params.values, limit, page

def _like_pattern(term: str) -> str:
    """Wrap a term for an unanchored ILIKE, escaping its wildcards."""
    escaped = term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f"%{escaped}%"

def summarize_row(row) -> Dict[str, Any]:
    """Shape a catalog row into a lightweight DApp summary."""
    return {
        'dapp_id': row['dapp_id'],
        'name': row['name'],
        'chains': parse_string_list(row['chains'], 'chains'),
        'categories': parse_string_list(row['categories'], 'categories'),
        'logo': row['logo'],
        'link': row['link'],
        'ratings': row['ratings']
    }

async def search_dapps(
        category: Any = None,
        chain: Any = None,
        ratings: Any = None,
        name: Optional[str] = None,
        limit: Any = None,
        page: Any = None,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
        pool = None
    ) -> Dict[str, Any]:
    """Search the catalog, ordered by rating descending.

    Returns:
        Dict containing:
            - dapps: List of DApp summaries (empty past the last page)
            - page: Page number actually used
            - limit: Page size actually used
    """
    if pool is None:
        pool = await get_pool()

    query, params, limit, page = build_search_query(
        category=category,
        chain=chain,
        ratings=ratings,
        name=name,
        limit=limit,
        page=page,
        default_limit=default_limit,
        max_limit=max_limit
    )
    logger.debug("Executing search query: %s with params: %r", query, params)

    try:
        async with pool.acquire() as conn:
            rows = await conn.fetch(query, *params)
    except STORE_EXCEPTIONS as e:
        logger.exception("Database error executing search query")
        raise DatabaseError(f"Search query failed: {e}") from e

    logger.debug("Search query returned %d results", len(rows))
    return {
        'dapps': [summarize_row(row) for row in rows],
        'page': page,
        'limit': limit
    }
