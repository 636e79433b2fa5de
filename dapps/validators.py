"""Structural validation for identifiers and paging input."""
import re
from typing import Any, Optional

from .exceptions import ValidationError

# Base58 alphabet: no 0, O, I or l
BASE58_RE = re.compile(r'^[1-9A-HJ-NP-Za-km-z]+$')
ACCOUNT_ID_MIN_LENGTH = 47
ACCOUNT_ID_MAX_LENGTH = 48

DIGITS_RE = re.compile(r'^[0-9]+$')

# Identifiers and offsets are bound as INT8
INT8_MAX = 2**63 - 1

def is_valid_account_id(account_id: Any) -> bool:
    """Check that a value looks like a Substrate/Polkadot SS58 address.

    Args:
        account_id: Candidate account address

    Returns:
        True if it is a base58 string of 47 or 48 characters
    """
    if not isinstance(account_id, str):
        return False
    if not ACCOUNT_ID_MIN_LENGTH <= len(account_id) <= ACCOUNT_ID_MAX_LENGTH:
        return False
    return bool(BASE58_RE.match(account_id))

def validate_account_id(account_id: Any) -> str:
    """Return the account id unchanged or raise ValidationError."""
    if not is_valid_account_id(account_id):
        raise ValidationError("Invalid accountId. Must be a valid blockchain address.")
    return account_id

def parse_dapp_id(dapp_id: Any) -> int:
    """Parse a DApp identifier into a positive integer.

    Accepts ints, integral floats and strings of decimal digits.

    Args:
        dapp_id: Raw identifier from a path segment or request body

    Returns:
        The identifier as an int

    Raises:
        ValidationError: If the value is missing, not integral, not positive,
            or too large for an INT8 column
    """
    # bool is an int subclass; True must not become DApp 1
    if dapp_id is None or isinstance(dapp_id, bool):
        raise ValidationError("Invalid dappId. Must be a positive integer.")

    if isinstance(dapp_id, int):
        value = dapp_id
    elif isinstance(dapp_id, float) and dapp_id.is_integer():
        value = int(dapp_id)
    elif isinstance(dapp_id, str) and DIGITS_RE.match(dapp_id.strip()):
        value = int(dapp_id.strip())
    else:
        raise ValidationError("Invalid dappId. Must be a positive integer.")

    if not 0 < value <= INT8_MAX:
        raise ValidationError("Invalid dappId. Must be a positive integer.")
    return value

def coerce_positive_int(value: Any, default: int, maximum: Optional[int] = None) -> int:
    """Coerce paging input, failing closed to the default.

    Anything that is not a positive whole number yields the default; values
    above maximum are clamped to it.
    """
    if value is None or isinstance(value, bool):
        return default
    text = str(value).strip()
    if not DIGITS_RE.match(text):
        return default
    number = int(text)
    if number < 1:
        return default
    if maximum is not None and number > maximum:
        return maximum
    return number

def coerce_rating(value: Any, default: float) -> float:
    """Coerce a minimum-rating threshold, falling back to the default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        rating = float(str(value).strip())
    except ValueError:
        return default
    # NaN and infinities would produce a predicate nothing satisfies
    if rating != rating or rating in (float('inf'), float('-inf')):
        return default
    return rating
