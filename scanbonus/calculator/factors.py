"""
Bonus factor resolution

Precedence for every (factor_type, factor_key) lookup:
child override -> user override -> system default.
"""
import math
from typing import Callable, Iterable, Optional, Sequence

from ..core.exceptions import MissingFactorError
from .models import BonusFactor, FactorTable

FactorLookup = Callable[[FactorTable, str, str], Optional[float]]


def _value(factors: Iterable[BonusFactor], factor_type: str, factor_key: str) -> Optional[float]:
    for f in factors:
        if f.factor_type != factor_type or f.factor_key != factor_key:
            continue
        try:
            value = float(f.factor_value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(value):
            return value
    return None


def child_override(table: FactorTable, factor_type: str, factor_key: str) -> Optional[float]:
    return _value((f for f in table.overrides if f.child_id), factor_type, factor_key)


def user_override(table: FactorTable, factor_type: str, factor_key: str) -> Optional[float]:
    return _value((f for f in table.overrides if not f.child_id), factor_type, factor_key)


def system_default(table: FactorTable, factor_type: str, factor_key: str) -> Optional[float]:
    return _value(table.defaults, factor_type, factor_key)


DEFAULT_PRECEDENCE: Sequence[FactorLookup] = (child_override, user_override, system_default)


def first_match(
    lookups: Sequence[FactorLookup],
    table: FactorTable,
    factor_type: str,
    factor_key: str
) -> Optional[float]:
    """Value of the first lookup that resolves, or None"""
    for lookup in lookups:
        value = lookup(table, factor_type, factor_key)
        if value is not None:
            return value
    return None


class FactorResolver:
    """Resolves factor values from a FactorTable"""

    def __init__(self, table: FactorTable, precedence: Sequence[FactorLookup] = DEFAULT_PRECEDENCE):
        self.table = table
        self.precedence = precedence

    def resolve(self, factor_type: str, factor_key: str, default: Optional[float] = None) -> Optional[float]:
        value = first_match(self.precedence, self.table, factor_type, factor_key)
        return default if value is None else value

    def require(self, factor_type: str, factor_key: str) -> float:
        """
        Resolve a factor that must be configured.

        Raises:
            MissingFactorError: If no override or default exists
        """
        value = first_match(self.precedence, self.table, factor_type, factor_key)
        if value is None:
            raise MissingFactorError(factor_type, factor_key)
        return value
