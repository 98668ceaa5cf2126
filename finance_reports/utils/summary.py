from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List

from finance_reports.db.source import TransactionSource
from finance_reports.models.report import AverageTransaction, PeriodSummary, TransactionCount
from finance_reports.models.transaction import DateWindow, Kind, TransactionRecord
from finance_reports.utils.money import (
    ZERO,
    category_totals,
    percentage,
    rank_categories,
    round_money,
    totals_by_kind,
)

logger = logging.getLogger(__name__)


class PeriodSummarizer:
    """
    Computes income/expense totals, savings, category breakdowns, counts and
    averages for a single date window.
    """

    def __init__(self, source: TransactionSource, top_limit: int = 5) -> None:
        self._source = source
        self._top_limit = top_limit

    def summarize(self, user_id: str, window: DateWindow) -> PeriodSummary:
        records = self._source.fetch(user_id, None, window)
        logger.info(
            f"Summarizing {len(records)} transactions for user {user_id} "
            f"between {window.start_date} and {window.end_date}"
        )
        return build_summary(window, records, self._top_limit)

    def summarize_month(self, user_id: str, as_of: date) -> PeriodSummary:
        """Summary of the calendar month containing ``as_of``."""
        return self.summarize(user_id, DateWindow.month_of(as_of))


def build_summary(window: DateWindow, records: Iterable[TransactionRecord], top_limit: int = 5) -> PeriodSummary:
    by_kind: Dict[Kind, List[TransactionRecord]] = {kind: [] for kind in Kind}
    for record in records:
        if window.contains(record.occurred_on):
            by_kind[record.kind].append(record)

    income = by_kind[Kind.INCOME]
    expenses = by_kind[Kind.EXPENSE]
    totals = totals_by_kind(income + expenses)
    total_income = totals[Kind.INCOME]
    total_expenses = totals[Kind.EXPENSE]

    expenses_by_category = rank_categories(category_totals(expenses))

    return PeriodSummary(
        start_date=window.start_date,
        end_date=window.end_date,
        total_income=total_income,
        total_expenses=total_expenses,
        savings_rate=percentage(total_income - total_expenses, total_income),
        income_by_category=rank_categories(category_totals(income)),
        expenses_by_category=expenses_by_category,
        top_expense_categories=expenses_by_category[:top_limit],
        transaction_count=TransactionCount(income=len(income), expense=len(expenses)),
        average_transaction=AverageTransaction(
            income=round_money(total_income / len(income)) if income else ZERO,
            expense=round_money(total_expenses / len(expenses)) if expenses else ZERO,
        ),
    )
