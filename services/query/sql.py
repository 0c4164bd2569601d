"""Lowering of predicate trees into parameterised SQLite WHERE clauses."""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .predicates import (
    And,
    Compare,
    InSet,
    IsTrue,
    Not,
    Or,
    Predicate,
    TagCoverage,
)

# Logical table name -> alias used in the outer query
DEFAULT_ALIASES = {
    'post': 'p',
    'pool': 'pl',
}

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def _column_sql(column, aliases: Mapping[str, str]) -> str:
    if column.table not in aliases:
        raise ValueError(f"No alias for table '{column.table}'")
    if not _IDENTIFIER.match(column.name):
        raise ValueError(f"Invalid column name: {column.name!r}")
    return f"{aliases[column.table]}.{column.name}"


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


def _sorted_values(values) -> List[Any]:
    # Deterministic parameter order keeps generated SQL stable
    return sorted(values, key=lambda value: (str(type(value)), value))


def _lower(predicate: Predicate, aliases: Mapping[str, str], params: List[Any]) -> str:
    if isinstance(predicate, And):
        if not predicate.children:
            return "1 = 1"
        return "(" + " AND ".join(_lower(child, aliases, params) for child in predicate.children) + ")"

    if isinstance(predicate, Or):
        if not predicate.children:
            return "1 = 0"
        return "(" + " OR ".join(_lower(child, aliases, params) for child in predicate.children) + ")"

    if isinstance(predicate, Not):
        return f"NOT ({_lower(predicate.child, aliases, params)})"

    if isinstance(predicate, Compare):
        params.append(predicate.value)
        return f"{_column_sql(predicate.column, aliases)} {predicate.op} ?"

    if isinstance(predicate, IsTrue):
        return f"{_column_sql(predicate.column, aliases)} = 1"

    if isinstance(predicate, InSet):
        if not predicate.values:
            return "1 = 0"
        values = _sorted_values(predicate.values)
        params.extend(values)
        return f"{_column_sql(predicate.column, aliases)} IN ({_placeholders(len(values))})"

    if isinstance(predicate, TagCoverage):
        if not predicate.names:
            return "1 = 1" if predicate.require_all else "1 = 0"
        names = sorted(predicate.names)
        params.extend(names)
        post_id = f"{aliases['post']}.id"
        subquery = (
            "SELECT cov_tp.post_id FROM tag_posts cov_tp "
            "JOIN tags cov_t ON cov_t.id = cov_tp.tag_id "
            f"WHERE cov_t.normalized_name IN ({_placeholders(len(names))})"
        )
        if predicate.require_all:
            # Every requested tag must be present on the post
            params.append(len(names))
            subquery += " GROUP BY cov_tp.post_id HAVING COUNT(DISTINCT cov_tp.tag_id) = ?"
        return f"{post_id} IN ({subquery})"

    raise TypeError(f"Unknown predicate node: {predicate!r}")


def lower(predicate: Predicate, aliases: Optional[Dict[str, str]] = None) -> Tuple[str, List[Any]]:
    """
    Lower a predicate tree to (sql, params).

    Args:
        predicate: Tree built from services.query.predicates
        aliases: Logical table name -> SQL alias, defaults to DEFAULT_ALIASES

    Returns:
        Tuple of (WHERE clause body, positional parameters)
    """
    params: List[Any] = []
    sql = _lower(predicate, aliases or DEFAULT_ALIASES, params)
    return sql, params
