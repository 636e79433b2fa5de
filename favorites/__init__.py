"""Favorites module for per-account DApp favorite sets.

This module provides:
1. Idempotent add and remove of DApp ids on an account's set
2. Listing an account's favorites, optionally with DApp summaries
3. Membership checks

Each set is one userprefs row holding an INT8[] of DApp ids. Every mutation
is a single statement using array_append/array_remove on the stored array,
so concurrent requests for the same account never lose an update.
"""

import logging
from typing import Any, Dict, List

from database import get_pool
from database.exceptions import DatabaseError, STORE_EXCEPTIONS
from dapps import NotFoundError, DappNotFoundError, parse_dapp_id, validate_account_id, summarize_row

# Configure logging
logger = logging.getLogger(__name__)

# Outcome of a mutation
CREATED = 'created'
UPDATED = 'updated'
UNCHANGED = 'unchanged'
DELETED = 'deleted'

class AccountNotFoundError(NotFoundError):
    """Raised when removing from an account that has no favorites set."""
    pass

# Inserts the set or appends to it in one statement. The WHERE on the
# conflict branch leaves an existing member alone, in which case no row is
# returned. xmax is 0 only for a freshly inserted row.
ADD_FAVORITE_QUERY = '''
    INSERT INTO userprefs (account_id, fav_dapp_id)
    VALUES ($1, ARRAY[$2::INT8])
    ON CONFLICT (account_id) DO UPDATE
    SET fav_dapp_id = array_append(COALESCE(userprefs.fav_dapp_id, '{}'), $2::INT8)
    WHERE NOT (COALESCE(userprefs.fav_dapp_id, '{}') @> ARRAY[$2::INT8])
    RETURNING fav_dapp_id, (xmax = 0) AS inserted
'''

REMOVE_FAVORITE_QUERY = '''
    UPDATE userprefs
    SET fav_dapp_id = array_remove(fav_dapp_id, $2::INT8)
    WHERE account_id = $1 AND $2::INT8 = ANY(fav_dapp_id)
    RETURNING fav_dapp_id
'''

FAVORITE_DETAILS_QUERY = '''
    SELECT
        dm.dapp_id,
        dm.name,
        dm.description,
        dm.logo,
        dm.website,
        dm.categories,
        dm.chains,
        dm.link,
        COALESCE(rm.ratings, 0) AS ratings
    FROM dapps_main dm
    LEFT JOIN reviews_make rm ON dm.dapp_id = rm.dapp_id
    WHERE dm.dapp_id = ANY($1::INT8[])
    ORDER BY dm.name ASC
'''

def _as_list(favorites) -> List[int]:
    return list(favorites) if favorites else []

class FavoritesManager:
    """Manages account favorites sets."""

    def __init__(self, pool=None):
        """Initialize favorites manager.

        Args:
            pool: Optional database pool. If not provided, will get from database module.
        """
        self.pool = pool

    async def ensure_pool(self):
        """Ensure database pool is available."""
        if not self.pool:
            self.pool = await get_pool()

    async def add(self, account_id: Any, dapp_id: Any) -> Dict[str, Any]:
        """Add a DApp to an account's favorites.

        Creates the set on the account's first favorite. Adding a DApp that is
        already present is not an error.

        Args:
            account_id: The account address
            dapp_id: The DApp identifier

        Returns:
            Dict containing:
                - account_id: The account address
                - favorites: The set after the call
                - status: 'created', 'updated' or 'unchanged'

        Raises:
            ValidationError: If either identifier is malformed
            DappNotFoundError: If the DApp is not in the catalog
            DatabaseError: If a query fails
        """
        account_id = validate_account_id(account_id)
        dapp_id = parse_dapp_id(dapp_id)
        await self.ensure_pool()

        try:
            async with self.pool.acquire() as conn:
                exists = await conn.fetchval(
                    'SELECT EXISTS(SELECT 1 FROM dapps_main WHERE dapp_id = $1)',
                    dapp_id
                )
                if not exists:
                    raise DappNotFoundError(f"DApp {dapp_id} not found")

                row = await conn.fetchrow(ADD_FAVORITE_QUERY, account_id, dapp_id)

                if row is None:
                    favorites = await conn.fetchval(
                        'SELECT fav_dapp_id FROM userprefs WHERE account_id = $1',
                        account_id
                    )
                    return {
                        'account_id': account_id,
                        'favorites': _as_list(favorites),
                        'status': UNCHANGED
                    }

        except STORE_EXCEPTIONS as e:
            logger.error(f"Error adding favorite {dapp_id} for {account_id}: {e}")
            raise DatabaseError(f"Failed to add favorite: {str(e)}") from e

        status = CREATED if row['inserted'] else UPDATED
        logger.info(f"Favorite {dapp_id} {status} for {account_id}")
        return {
            'account_id': account_id,
            'favorites': _as_list(row['fav_dapp_id']),
            'status': status
        }

    async def remove(self, account_id: Any, dapp_id: Any, remove_empty: bool = False) -> Dict[str, Any]:
        """Remove a DApp from an account's favorites.

        Args:
            account_id: The account address
            dapp_id: The DApp identifier
            remove_empty: Delete the set itself once its last favorite is removed

        Returns:
            Dict containing:
                - account_id: The account address
                - favorites: The set after the call
                - status: 'updated', 'deleted' or 'unchanged'

        Raises:
            ValidationError: If either identifier is malformed
            AccountNotFoundError: If the account has no favorites set
            DatabaseError: If a query fails
        """
        account_id = validate_account_id(account_id)
        dapp_id = parse_dapp_id(dapp_id)
        await self.ensure_pool()

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(REMOVE_FAVORITE_QUERY, account_id, dapp_id)

                if row is None:
                    current = await conn.fetchrow(
                        'SELECT fav_dapp_id FROM userprefs WHERE account_id = $1',
                        account_id
                    )
                    if current is None:
                        raise AccountNotFoundError(f"Account {account_id} not found in favorites")
                    return {
                        'account_id': account_id,
                        'favorites': _as_list(current['fav_dapp_id']),
                        'status': UNCHANGED
                    }

                favorites = _as_list(row['fav_dapp_id'])
                status = UPDATED

                if not favorites and remove_empty:
                    # Guarded so a concurrent add is never discarded
                    await conn.execute(
                        '''
                        DELETE FROM userprefs
                        WHERE account_id = $1
                        AND cardinality(fav_dapp_id) = 0
                        ''',
                        account_id
                    )
                    status = DELETED

        except STORE_EXCEPTIONS as e:
            logger.error(f"Error removing favorite {dapp_id} for {account_id}: {e}")
            raise DatabaseError(f"Failed to remove favorite: {str(e)}") from e

        logger.info(f"Favorite {dapp_id} removed for {account_id} ({status})")
        return {
            'account_id': account_id,
            'favorites': favorites,
            'status': status
        }

    async def list(self, account_id: Any, include_details: bool = False) -> Dict[str, Any]:
        """Get an account's favorites.

        Unknown accounts have an empty list; nothing is created.

        Args:
            account_id: The account address
            include_details: Also return DApp summaries ordered by name

        Returns:
            Dict containing:
                - account_id: The account address
                - favorites: List of DApp ids in insertion order
                - dapp_details: List of summaries (only when include_details)
        """
        account_id = validate_account_id(account_id)
        await self.ensure_pool()

        try:
            async with self.pool.acquire() as conn:
                favorites = _as_list(await conn.fetchval(
                    'SELECT fav_dapp_id FROM userprefs WHERE account_id = $1',
                    account_id
                ))

                result = {
                    'account_id': account_id,
                    'favorites': favorites
                }

                if include_details and favorites:
                    rows = await conn.fetch(FAVORITE_DETAILS_QUERY, favorites)
                    result['dapp_details'] = [
                        {
                            **summarize_row(row),
                            'description': row['description'],
                            'website': row['website']
                        }
                        for row in rows
                    ]

                return result

        except STORE_EXCEPTIONS as e:
            logger.error(f"Error fetching favorites for {account_id}: {e}")
            raise DatabaseError(f"Failed to fetch favorites: {str(e)}") from e

    async def check(self, account_id: Any, dapp_id: Any) -> bool:
        """Check whether a DApp is in an account's favorites.

        Returns:
            True if favorited; False for unknown accounts
        """
        account_id = validate_account_id(account_id)
        dapp_id = parse_dapp_id(dapp_id)
        await self.ensure_pool()

        try:
            async with self.pool.acquire() as conn:
                return bool(await conn.fetchval(
                    '''
                    SELECT EXISTS(
                        SELECT 1 FROM userprefs
                        WHERE account_id = $1
                        AND $2::INT8 = ANY(fav_dapp_id)
                    )
                    ''',
                    account_id,
                    dapp_id
                ))
        except STORE_EXCEPTIONS as e:
            logger.error(f"Error checking favorite {dapp_id} for {account_id}: {e}")
            raise DatabaseError(f"Failed to check favorite status: {str(e)}") from e

# Export public interface
__all__ = [
    'FavoritesManager',
    'AccountNotFoundError',
    'CREATED',
    'UPDATED',
    'UNCHANGED',
    'DELETED'
]
