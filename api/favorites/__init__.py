"""Account favorites endpoints.

These routes are public; the account address in the request identifies the
favorites set.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from typing import Any, Optional
from pydantic import BaseModel

from dapps import ValidationError, DappNotFoundError, parse_dapp_id, validate_account_id
from database import get_pool
from favorites import FavoritesManager, AccountNotFoundError, CREATED, UNCHANGED
from ..responses import api_error

router = APIRouter(
    prefix="/api/favorites",
    tags=["Favorites"]
)

ACCOUNT_ID_MESSAGE = 'accountId must be a 47 or 48 character base58 address'
DAPP_ID_MESSAGE = 'dappId must be a positive integer'

class FavoriteRequest(BaseModel):
    """Request model for adding or removing a favorite."""
    accountId: Optional[Any] = None
    dappId: Optional[Any] = None

def _validate_pair(account_id: Any, dapp_id: Any, dapp_error: str) -> None:
    try:
        validate_account_id(account_id)
    except ValidationError:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            'Invalid or missing accountId. Must be a valid blockchain address.',
            ACCOUNT_ID_MESSAGE
        )
    try:
        parse_dapp_id(dapp_id)
    except ValidationError:
        raise api_error(status.HTTP_400_BAD_REQUEST, dapp_error, DAPP_ID_MESSAGE)

@router.post("")
async def add_favorite(request: FavoriteRequest, response: Response, pool=Depends(get_pool)):
    """Add a DApp to an account's favorites.

    Returns 201 when the account's set is created, 200 otherwise
    (including when the DApp was already a favorite).
    """
    _validate_pair(
        request.accountId, request.dappId,
        'Invalid or missing dappId. Must be a positive integer.'
    )

    try:
        result = await FavoritesManager(pool).add(request.accountId, request.dappId)
    except DappNotFoundError:
        raise api_error(
            status.HTTP_404_NOT_FOUND,
            'DApp not found',
            'No DApp exists with the given dappId'
        )

    if result['status'] == CREATED:
        response.status_code = status.HTTP_201_CREATED

    return {
        'success': True,
        'message': 'DApp already in favorites' if result['status'] == UNCHANGED else 'Favorite added successfully',
        'data': {
            'accountId': result['account_id'],
            'favorites': result['favorites']
        }
    }

@router.delete("")
async def remove_favorite(
    request: FavoriteRequest,
    removeEmpty: Optional[str] = Query(None),
    pool=Depends(get_pool)
):
    """Remove a DApp from an account's favorites.

    Pass removeEmpty=true to delete the account's set once it is empty.
    """
    _validate_pair(
        request.accountId, request.dappId,
        'Invalid or missing dappId. Must be a positive integer.'
    )

    try:
        result = await FavoritesManager(pool).remove(
            request.accountId,
            request.dappId,
            remove_empty=removeEmpty == 'true'
        )
    except AccountNotFoundError:
        raise api_error(
            status.HTTP_404_NOT_FOUND,
            'Account not found in favorites',
            'This account has no favorites to remove'
        )

    return {
        'success': True,
        'message': 'DApp not in favorites' if result['status'] == UNCHANGED else 'Favorite removed successfully',
        'data': {
            'accountId': result['account_id'],
            'favorites': result['favorites']
        }
    }

@router.get("/{account_id}")
async def list_favorites(
    account_id: str,
    includeDetails: Optional[str] = Query(None),
    pool=Depends(get_pool)
):
    """Get an account's favorite DApp ids, optionally with DApp summaries."""
    try:
        result = await FavoritesManager(pool).list(
            account_id,
            include_details=includeDetails == 'true'
        )
    except ValidationError:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            'Invalid accountId. Must be a valid blockchain address.',
            ACCOUNT_ID_MESSAGE
        )

    data = {
        'accountId': result['account_id'],
        'favorites': result['favorites']
    }
    if 'dapp_details' in result:
        data['dappDetails'] = result['dapp_details']

    return {
        'success': True,
        'data': data
    }

@router.get("/{account_id}/{dapp_id}")
async def check_favorite(account_id: str, dapp_id: str, pool=Depends(get_pool)):
    """Check whether a DApp is in an account's favorites."""
    _validate_pair(account_id, dapp_id, 'Invalid dappId')

    is_favorited = await FavoritesManager(pool).check(account_id, dapp_id)

    return {
        'success': True,
        'data': {
            'accountId': account_id,
            'dappId': parse_dapp_id(dapp_id),
            'isFavorited': is_favorited
        }
    }

__all__ = ['router']
