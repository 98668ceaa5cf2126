from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from finance_reports.core.errors import InvalidArgument
from finance_reports.db.source import TransactionSource
from finance_reports.models.report import CategoryTrend, MonthlyTrend, TrendAverages, TrendReport
from finance_reports.models.transaction import DateWindow, Kind, TransactionRecord
from finance_reports.utils.money import (
    ZERO,
    average,
    category_totals,
    growth_rate,
    rank_categories,
    totals_by_kind,
)

logger = logging.getLogger(__name__)

MonthKey = Tuple[int, int]


def month_windows(as_of: date, months: int) -> List[DateWindow]:
    """
    Calendar-month windows ending with the month containing ``as_of``,
    ordered oldest to newest.
    """
    current = DateWindow.month_of(as_of)
    return [current.shift_months(-offset) for offset in reversed(range(months))]


class TrendAnalyzer:
    """
    Builds a multi-month view of income, expenses and savings.

    All records for the analyzed span are read once per call and bucketed by
    month; every derived series reuses those per-month aggregates.
    """

    def __init__(self, source: TransactionSource, top_categories: int = 5) -> None:
        self._source = source
        self._top_categories = top_categories

    def analyze(self, user_id: str, months: int = 6, *, as_of: date) -> TrendReport:
        if isinstance(months, bool) or not isinstance(months, int) or months < 1:
            raise InvalidArgument(f"months must be a positive integer, got {months!r}")

        windows = month_windows(as_of, months)
        span = DateWindow(windows[0].start_date, windows[-1].end_date)
        records = self._source.fetch(user_id, None, span)
        logger.info(
            f"Analyzing {months} months of trends for user {user_id} "
            f"({len(records)} transactions from {span.start_date} to {span.end_date})"
        )

        buckets: Dict[MonthKey, List[TransactionRecord]] = {_key(w): [] for w in windows}
        for record in records:
            key = (record.occurred_on.year, record.occurred_on.month)
            if key in buckets:
                buckets[key].append(record)

        monthly_trends = tuple(self._monthly_row(w, buckets[_key(w)]) for w in windows)
        category_trends = self._category_trends(user_id, span, windows, buckets)

        return TrendReport(
            monthly_trends=monthly_trends,
            category_trends=category_trends,
            averages=TrendAverages(
                monthly_income=average([m.income for m in monthly_trends]),
                monthly_expenses=average([m.expenses for m in monthly_trends]),
                monthly_savings=average([m.net for m in monthly_trends]),
            ),
            growth_rates=_growth_rates(monthly_trends),
        )

    @staticmethod
    def _monthly_row(window: DateWindow, records: List[TransactionRecord]) -> MonthlyTrend:
        totals = totals_by_kind(records)
        return MonthlyTrend(
            month=window.start_date.strftime("%B %Y"),
            month_short=window.start_date.strftime("%b %y"),
            date=window.start_date,
            income=totals[Kind.INCOME],
            expenses=totals[Kind.EXPENSE],
        )

    def _category_trends(
        self,
        user_id: str,
        span: DateWindow,
        windows: List[DateWindow],
        buckets: Dict[MonthKey, List[TransactionRecord]],
    ) -> Tuple[CategoryTrend, ...]:
        ranked = rank_categories(self._source.sum_by_category(user_id, Kind.EXPENSE, span))
        top_names = [name for name, _ in ranked[: self._top_categories]]
        if not top_names:
            return ()

        per_month: Dict[MonthKey, Dict[str, Decimal]] = {
            key: category_totals(r for r in items if r.kind is Kind.EXPENSE)
            for key, items in buckets.items()
        }
        return tuple(
            CategoryTrend(
                name=name,
                data=tuple(
                    (w.start_date.strftime("%b %y"), per_month[_key(w)].get(name, ZERO))
                    for w in windows
                ),
            )
            for name in top_names
        )


def _key(window: DateWindow) -> MonthKey:
    return (window.start_date.year, window.start_date.month)


def _growth_rates(monthly_trends: Tuple[MonthlyTrend, ...]) -> Mapping[str, Decimal]:
    if len(monthly_trends) < 2:
        return MappingProxyType({})

    first, last = monthly_trends[0], monthly_trends[-1]
    return MappingProxyType({
        "income": growth_rate(first.income, last.income),
        "expenses": growth_rate(first.expenses, last.expenses),
        "savings": growth_rate(first.net, last.net),
    })
