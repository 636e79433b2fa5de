"""Filter clause building for catalog queries.

Every externally supplied value is bound as a positional parameter. The
placeholder numbers are generated from the same list the values are
appended to, so the SQL text and the argument list cannot drift apart.
"""
from typing import Any, List, Optional

class QueryParams:
    """Positional parameter list for an asyncpg query ($1, $2, ...)."""

    def __init__(self):
        self.values: List[Any] = []

    def add(self, value: Any) -> str:
        """Bind a value and return its placeholder."""
        self.values.append(value)
        return f"${len(self.values)}"

    def __len__(self) -> int:
        return len(self.values)

def split_multi_value(values: Any) -> List[str]:
    """Normalize a filter parameter to a list of values.

    Accepts None, a scalar, a comma-delimited string, or a list of any of
    those (repeated query parameters). Blank entries are dropped.
    """
    if values is None:
        return []
    if not isinstance(values, (list, tuple)):
        values = [values]

    result = []
    for value in values:
        if value is None:
            continue
        for part in str(value).split(','):
            part = part.strip()
            if part:
                result.append(part)
    return result

def build_or_clause(field: str, values: Any, params: QueryParams) -> Optional[str]:
    """Build a disjunctive equality predicate for one field.

    Args:
        field: Qualified column name. Must come from code, never from input.
        values: Raw filter value(s), see split_multi_value
        params: Parameter list the values are bound into

    Returns:
        "(field = $n OR field = $m ...)", or None when there is nothing to
        filter on so the caller skips the predicate entirely.
    """
    items = split_multi_value(values)
    if not items:
        return None
    return '(' + ' OR '.join(f"{field} = {params.add(item)}" for item in items) + ')'

def combine_and(clauses: List[Optional[str]]) -> str:
    """Join predicates conjunctively into a WHERE clause ('' if none)."""
    present = [clause for clause in clauses if clause]
    if not present:
        return ''
    return 'WHERE ' + ' AND '.join(present)
