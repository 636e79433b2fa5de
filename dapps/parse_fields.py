"""Normalization of catalog collection columns.

The ingestion side stores chains, categories, social links and tags in
whatever encoding it received: native arrays, JSON array text, PostgreSQL
array literals, comma-joined JSON objects or plain comma-delimited labels.
These helpers turn every variant into a list and never raise; a value that
cannot be read becomes an empty list and is logged.
"""
import json
import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

NULL_TEXT = ('', 'null', 'NULL', '{}', '[]')

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() in NULL_TEXT)

def _split_labels(text: str) -> List[str]:
    """Split delimited text into trimmed, unquoted, non-empty labels."""
    labels = []
    for item in text.split(','):
        item = item.strip().strip('"').strip("'").strip()
        if item:
            labels.append(item)
    return labels

def _as_label(item: Any) -> str:
    if isinstance(item, dict):
        item = item.get('name')
    return str(item).strip() if item is not None else ''

def parse_string_list(value: Any, field_name: str = '') -> List[str]:
    """Normalize a chains/categories value to a list of labels.

    Strategies, in order: native list, JSON array text, PostgreSQL array
    literal, delimiter split, single value.

    Args:
        value: Raw column value
        field_name: Column name, used only in log messages

    Returns:
        List of non-empty labels
    """
    if _is_blank(value):
        return []

    if isinstance(value, (list, tuple)):
        return [label for label in (_as_label(item) for item in value) if label]

    if not isinstance(value, str):
        logger.warning("Unexpected %s value of type %s, using empty list", field_name, type(value).__name__)
        return []

    text = value.strip()

    if text.startswith('[') and text.endswith(']'):
        try:
            parsed = json.loads(text)
        except ValueError:
            return _split_labels(text[1:-1])
        if isinstance(parsed, list):
            return [label for label in (_as_label(item) for item in parsed) if label]
        logger.warning("Could not parse %s value %r, using empty list", field_name, text)
        return []

    if text.startswith('{') and text.endswith('}'):
        return _split_labels(text[1:-1])

    if ',' in text:
        return _split_labels(text)

    return [text]

def _load_json_items(text: str) -> List[Any]:
    """Parse a JSON array, or comma-joined JSON values wrapped into one."""
    if not text.startswith('['):
        text = f'[{text}]'
    parsed = json.loads(text)
    if not isinstance(parsed, list):
        raise ValueError(f"expected a JSON array, got {type(parsed).__name__}")
    return parsed

def _decode_item(item: Any) -> Any:
    """Decode array elements that are themselves JSON text."""
    if isinstance(item, str):
        stripped = item.strip()
        if stripped.startswith('{'):
            try:
                return json.loads(stripped)
            except ValueError:
                return item
    return item

def parse_social_links(value: Any) -> List[Dict[str, Any]]:
    """Normalize a social_links value to a list of link objects.

    Elements that do not decode to objects are dropped.
    """
    if _is_blank(value):
        return []

    try:
        if isinstance(value, (list, tuple)):
            items = list(value)
        elif isinstance(value, str):
            items = _load_json_items(value.strip())
        else:
            raise ValueError(f"unsupported type {type(value).__name__}")
    except ValueError as e:
        logger.warning("Error parsing social_links: %s", e)
        return []

    return [item for item in (_decode_item(i) for i in items) if isinstance(item, dict)]

def parse_tags(value: Any) -> List[str]:
    """Normalize a tags value to a list of tag names.

    Tags are usually stored as objects with a name key; only the names are kept.
    Plain delimited labels are accepted as well.
    """
    if _is_blank(value):
        return []

    if isinstance(value, (list, tuple)):
        items = list(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            items = _load_json_items(text)
        except ValueError as e:
            if '{' in text:
                logger.warning("Error parsing tags: %s", e)
                return []
            return parse_string_list(text, 'tags')
    else:
        logger.warning("Unexpected tags value of type %s, using empty list", type(value).__name__)
        return []

    return [name for name in (_as_label(_decode_item(item)) for item in items) if name]
