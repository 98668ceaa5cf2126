from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_reports.core.errors import InvalidArgument


class Kind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionRecord(BaseModel):
    """A single income or expense entry as read from storage."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(gt=0, decimal_places=2)
    kind: Kind
    occurred_on: date
    category_name: str
    description: Optional[str] = ""


@dataclass(frozen=True)
class DateWindow:
    """Inclusive calendar range ``[start_date, end_date]``."""

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise InvalidArgument(
                f"end_date {self.end_date.isoformat()} is before start_date {self.start_date.isoformat()}"
            )

    @classmethod
    def for_month(cls, year: int, month: int) -> "DateWindow":
        if not 1 <= month <= 12:
            raise InvalidArgument(f"month must be between 1 and 12, got {month}")
        if not MINYEAR <= year <= MAXYEAR:
            raise InvalidArgument(f"year must be between {MINYEAR} and {MAXYEAR}, got {year}")
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @classmethod
    def month_of(cls, day: date) -> "DateWindow":
        return cls.for_month(day.year, day.month)

    @classmethod
    def parse_month(cls, value: str) -> "DateWindow":
        """Build the window for a ``YYYY-MM`` string."""
        try:
            year_part, month_part = value.split("-")
            year, month = int(year_part), int(month_part)
        except ValueError as exc:
            raise InvalidArgument(f"month must follow YYYY-MM format, got {value!r}") from exc
        return cls.for_month(year, month)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def shift_months(self, offset: int) -> "DateWindow":
        """Return the calendar month ``offset`` months away from this window's start."""
        index = self.start_date.year * 12 + (self.start_date.month - 1) + offset
        return DateWindow.for_month(index // 12, index % 12 + 1)
