"""DApp catalog module.

This module provides functionality for:
- Searching the catalog with category, chain, rating and name filters
- Fetching one DApp with its contract, metrics, rating and reviews
- Normalizing the collection columns stored in mixed encodings
- Validating account addresses and DApp identifiers

The catalog is read-only here; it is populated by the ingestion side.
"""

from .exceptions import DappError, ValidationError, NotFoundError, DappNotFoundError
from .validators import (
    is_valid_account_id, validate_account_id, parse_dapp_id,
    coerce_positive_int, coerce_rating
)
from .parse_fields import parse_string_list, parse_social_links, parse_tags
from .filters import QueryParams, build_or_clause, split_multi_value, combine_and
from .search import search_dapps, build_search_query, summarize_row, DEFAULT_LIMIT, MAX_LIMIT
from .get_dapp import get_dapp_details, fold_detail_rows

__all__ = [
    'DappError',
    'ValidationError',
    'NotFoundError',
    'DappNotFoundError',
    'is_valid_account_id',
    'validate_account_id',
    'parse_dapp_id',
    'coerce_positive_int',
    'coerce_rating',
    'parse_string_list',
    'parse_social_links',
    'parse_tags',
    'QueryParams',
    'build_or_clause',
    'split_multi_value',
    'combine_and',
    'search_dapps',
    'build_search_query',
    'summarize_row',
    'get_dapp_details',
    'fold_detail_rows',
    'DEFAULT_LIMIT',
    'MAX_LIMIT'
]
