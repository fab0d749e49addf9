"""
Key codec: named key values to positional SQL and back.

A key is always an ordered list of column names plus a name-to-value mapping.
Single-column keys are just the one-element case, so there is no separate code
path for them and placeholder numbering always follows ``key_columns``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from .config import EntityConfig
from .errors import MissingKeyError


@dataclass(frozen=True)
class WhereClause:
    """A ``WHERE`` fragment and its positional parameters, in placeholder order."""

    clause: str
    params: List[Any]


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def extract_key_values(config: EntityConfig, raw_params: Mapping[str, Any]) -> Dict[str, Any]:
    """Pick the key columns out of route parameters or a request body.

    Args:
        config: Entity whose key is being extracted
        raw_params: Route parameters or body fields; extra entries are ignored

    Returns:
        Key values ordered like ``config.key_columns``

    Raises:
        MissingKeyError: If any key column is absent or blank
    """
    missing = [column for column in config.key_columns if _is_missing(raw_params.get(column))]
    if missing:
        raise MissingKeyError(missing)
    return {column: raw_params[column] for column in config.key_columns}


def build_where_clause(config: EntityConfig, key_values: Mapping[str, Any], start: int = 1) -> WhereClause:
    """Build ``col1 = $n AND col2 = $n+1 ...`` for the entity's key.

    Args:
        config: Entity whose key columns drive the clause
        key_values: Values for every key column, in any order
        start: Number of the first placeholder, for clauses appended after other parameters

    Returns:
        The clause and its parameters in ``config.key_columns`` order

    Raises:
        MissingKeyError: If ``key_values`` lacks a key column
    """
    missing = [column for column in config.key_columns if column not in key_values]
    if missing:
        raise MissingKeyError(missing)

    conditions = []
    params = []
    for offset, column in enumerate(config.key_columns):
        conditions.append(f"{column} = ${start + offset}")
        params.append(key_values[column])
    return WhereClause(clause=" AND ".join(conditions), params=params)
