"""Error types raised by the keyed-entity framework.

Expected business outcomes (not found, duplicates, broken references) are
reported through ``OperationResult`` and never raised; the exceptions here
cover programming mistakes and malformed requests.
"""

from __future__ import annotations

from typing import Sequence


class KeyedEntityError(Exception):
    """Base error for the keyed-entity framework."""


class EntityConfigError(KeyedEntityError):
    """Raised when an ``EntityConfig`` breaks one of its invariants."""


class MissingKeyError(KeyedEntityError):
    """Raised when request parameters do not supply every declared key column."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing key value(s): {', '.join(self.missing)}")
