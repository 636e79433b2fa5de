"""DApp catalog endpoints. All routes require an access token."""

from fastapi import APIRouter, Depends, Query, Security, status
from typing import List, Optional

from auth import get_current_client
from config import settings_conf
from dapps import search_dapps, get_dapp_details, ValidationError, DappNotFoundError
from database import get_pool
from ..responses import api_error

router = APIRouter(
    tags=["DApps"],
    dependencies=[Security(get_current_client)]
)

@router.get("/dapp-search")
async def dapp_search(
    category: Optional[List[str]] = Query(None),
    chain: Optional[List[str]] = Query(None),
    ratings: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    pool=Depends(get_pool)
):
    """Search DApps by category, chain, minimum rating and name.

    category and chain accept repeated parameters or comma-separated lists.
    Non-numeric limit/page values fall back to their defaults.
    """
    result = await search_dapps(
        category=category,
        chain=chain,
        ratings=ratings,
        name=name,
        limit=limit,
        page=page,
        default_limit=settings_conf['search_default_limit'],
        max_limit=settings_conf['search_max_limit'],
        pool=pool
    )
    return {
        'success': True,
        'data': result['dapps'],
        'pagination': {
            'page': result['page'],
            'limit': result['limit'],
            'count': len(result['dapps'])
        }
    }

@router.get("/api/dapps/{dapp_id}")
async def get_dapp(dapp_id: str, pool=Depends(get_pool)):
    """Get a DApp with contract, metrics, rating and per-platform reviews."""
    try:
        details = await get_dapp_details(dapp_id, pool=pool)
    except ValidationError:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            'Invalid dapp_id parameter',
            'dapp_id must be a positive integer'
        )
    except DappNotFoundError:
        raise api_error(
            status.HTTP_404_NOT_FOUND,
            'Dapp not found',
            'No DApp exists with the given dapp_id'
        )

    return {
        'success': True,
        'data': details
    }

__all__ = ['router']
