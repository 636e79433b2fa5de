from typing import Any, Dict, Sequence
import logging

from database import get_pool
from database.exceptions import DatabaseError, STORE_EXCEPTIONS
from .exceptions import DappNotFoundError
from .parse_fields import parse_string_list, parse_social_links, parse_tags
from .validators import parse_dapp_id

logger = logging.getLogger(__name__)

# One row per platform review. The inner joins mean a DApp missing its
# contract, metrics, rating or any review yields no rows at all.
DETAILS_QUERY = '''
    SELECT
        dm.name,
        dm.description,
        dm.full_description,
        dm.logo,
        dm.website,
        dm.chains,
        dm.categories,
        dm.social_links,
        dm.tags,
        sc.smartcontract,
        am.balance,
        am.transactions,
        am.uaw,
        am.volume,
        tr.link,
        tr.platform,
        tr.review,
        rm.ratings,
        rm.summarized_review
    FROM dapps_main AS dm
    JOIN top_reviews AS tr ON dm.dapp_id = tr.dapp_id
    JOIN smart_contract_info AS sc ON sc.dapp_id = dm.dapp_id
    JOIN aggregated_metrics AS am ON am.dapp_id = dm.dapp_id
    JOIN reviews_make AS rm ON rm.dapp_id = dm.dapp_id
    WHERE dm.dapp_id = $1
'''

def fold_detail_rows(rows: Sequence[Any]) -> Dict[str, Any]:
    """Fold the joined detail rows into one nested record.

    Scalar fields come from the first row; each row contributes its
    platform review, keyed by platform name.
    """
    first = rows[0]
    details = {
        'name': first['name'],
        'description': first['description'],
        'full_description': first['full_description'],
        'logo': first['logo'],
        'website': first['website'],
        'chains': parse_string_list(first['chains'], 'chains'),
        'categories': parse_string_list(first['categories'], 'categories'),
        'social_links': parse_social_links(first['social_links']),
        'tags': parse_tags(first['tags']),
        'smartcontract': first['smartcontract'],
        'metrics': {
            'balance': first['balance'],
            'transactions': first['transactions'],
            'uaw': first['uaw'],
            'volume': first['volume']
        },
        'ratings': first['ratings'],
        'summarized_review': first['summarized_review'],
        'reviews': {}
    }

    for row in rows:
        if row['platform'] and row['review']:
            details['reviews'][row['platform']] = {
                'review': row['review'],
                'link': row['link']
            }

    return details

async def get_dapp_details(dapp_id: Any, pool=None) -> Dict[str, Any]:
    """Get a DApp with its contract, metrics, rating and reviews.

    Args:
        dapp_id: The DApp identifier, as an int or digit string

    Returns:
        Dict containing the nested DApp record

    Raises:
        ValidationError: If dapp_id is not a positive integer (no query is made)
        DappNotFoundError: If the DApp or one of its required parts is missing
        DatabaseError: If the query fails
    """
    dapp_id = parse_dapp_id(dapp_id)

    if pool is None:
        pool = await get_pool()

    try:
        async with pool.acquire() as conn:
            rows = await conn.fetch(DETAILS_QUERY, dapp_id)
    except STORE_EXCEPTIONS as e:
        logger.exception("Error fetching dapp %s", dapp_id)
        raise DatabaseError(f"Details query failed: {e}") from e

    if not rows:
        raise DappNotFoundError(f"Dapp {dapp_id} not found")

    return fold_detail_rows(rows)
