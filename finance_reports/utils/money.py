from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from finance_reports.models.transaction import Kind, TransactionRecord

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")

CategoryAmounts = Tuple[Tuple[str, Decimal], ...]


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def percentage(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``numerator / denominator * 100`` rounded to cents, 0 when the denominator is 0."""
    if not denominator:
        return ZERO
    return round_money(numerator / denominator * HUNDRED)


def growth_rate(start: Decimal, end: Decimal) -> Decimal:
    return percentage(end - start, start)


def average(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return ZERO
    return round_money(sum(values, ZERO) / len(values))


def totals_by_kind(records: Iterable[TransactionRecord]) -> Dict[Kind, Decimal]:
    totals: Dict[Kind, Decimal] = {kind: ZERO for kind in Kind}
    for record in records:
        totals[record.kind] += record.amount
    return totals


def category_totals(records: Iterable[TransactionRecord]) -> Dict[str, Decimal]:
    """Sum amounts per category, keyed in first-encountered order."""
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for record in records:
        totals[record.category_name] += record.amount
    return dict(totals)


def rank_categories(totals: Dict[str, Decimal]) -> CategoryAmounts:
    # Ties on amount fall back to the category name so ordering is reproducible.
    ranked: List[Tuple[str, Decimal]] = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return tuple(ranked)


def to_native(obj: Any) -> Any:
    """
    Recursively convert Decimals, dates and tuples into JSON-friendly values.
    Decimals that a float cannot hold exactly are emitted as strings.
    """
    if isinstance(obj, (list, tuple)):
        return [to_native(item) for item in obj]
    if isinstance(obj, Mapping):
        return {(k.value if isinstance(k, Kind) else k): to_native(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        as_float = float(obj)
        if Decimal(repr(as_float)) == obj:
            return as_float
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    return obj
