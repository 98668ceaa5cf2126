from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from finance_reports.utils.money import CategoryAmounts, to_native


@dataclass(frozen=True)
class TransactionCount:
    income: int = 0
    expense: int = 0

    @property
    def total(self) -> int:
        return self.income + self.expense

    def to_dict(self) -> Dict[str, int]:
        return {"income": self.income, "expense": self.expense, "total": self.total}


@dataclass(frozen=True)
class AverageTransaction:
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    def to_dict(self) -> Dict[str, Any]:
        return to_native({"income": self.income, "expense": self.expense})


@dataclass(frozen=True)
class PeriodSummary:
    """Totals, balances and breakdowns for one date window."""

    start_date: date
    end_date: date
    total_income: Decimal
    total_expenses: Decimal
    savings_rate: Decimal
    income_by_category: CategoryAmounts
    expenses_by_category: CategoryAmounts
    top_expense_categories: CategoryAmounts
    transaction_count: TransactionCount
    average_transaction: AverageTransaction

    @property
    def net_savings(self) -> Decimal:
        return self.total_income - self.total_expenses

    def top_expenses(self, limit: int = 5) -> CategoryAmounts:
        return self.expenses_by_category[:limit]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_income": to_native(self.total_income),
            "total_expenses": to_native(self.total_expenses),
            "net_savings": to_native(self.net_savings),
            "savings_rate": to_native(self.savings_rate),
            "income_by_category": to_native(self.income_by_category),
            "expenses_by_category": to_native(self.expenses_by_category),
            "top_expense_categories": to_native(self.top_expense_categories),
            "transaction_count": self.transaction_count.to_dict(),
            "average_transaction": self.average_transaction.to_dict(),
        }


@dataclass(frozen=True)
class MonthlyTrend:
    month: str
    month_short: str
    date: date
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses

    def to_dict(self) -> Dict[str, Any]:
        return to_native(
            {
                "month": self.month,
                "month_short": self.month_short,
                "date": self.date,
                "income": self.income,
                "expenses": self.expenses,
                "net": self.net,
            }
        )


@dataclass(frozen=True)
class CategoryTrend:
    name: str
    data: Tuple[Tuple[str, Decimal], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "data": to_native(self.data)}


@dataclass(frozen=True)
class TrendAverages:
    monthly_income: Decimal = Decimal("0")
    monthly_expenses: Decimal = Decimal("0")
    monthly_savings: Decimal = Decimal("0")

    def to_dict(self) -> Dict[str, Any]:
        return to_native(
            {
                "monthly_income": self.monthly_income,
                "monthly_expenses": self.monthly_expenses,
                "monthly_savings": self.monthly_savings,
            }
        )


@dataclass(frozen=True)
class TrendReport:
    """Month-by-month series, category trends and growth metrics, oldest month first."""

    monthly_trends: Tuple[MonthlyTrend, ...]
    category_trends: Tuple[CategoryTrend, ...]
    averages: TrendAverages
    # Empty when fewer than two months were analyzed.
    growth_rates: Mapping[str, Decimal] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def income_trend(self) -> Tuple[Tuple[str, Decimal], ...]:
        return tuple((m.month_short, m.income) for m in self.monthly_trends)

    @property
    def expense_trend(self) -> Tuple[Tuple[str, Decimal], ...]:
        return tuple((m.month_short, m.expenses) for m in self.monthly_trends)

    @property
    def savings_trend(self) -> Tuple[Tuple[str, Decimal], ...]:
        return tuple((m.month_short, m.net) for m in self.monthly_trends)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "monthly_trends": [m.to_dict() for m in self.monthly_trends],
            "income_trend": to_native(self.income_trend),
            "expense_trend": to_native(self.expense_trend),
            "savings_trend": to_native(self.savings_trend),
            "category_trends": [c.to_dict() for c in self.category_trends],
            "averages": self.averages.to_dict(),
            "growth_rates": to_native(self.growth_rates),
        }
