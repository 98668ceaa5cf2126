from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional

from finance_reports.models.transaction import DateWindow, Kind, TransactionRecord
from finance_reports.utils.money import category_totals


class TransactionSource(ABC):
    """
    Read-only access to a user's transactions. Callers are expected to have
    authorized ``user_id`` before asking for its records.
    """

    @abstractmethod
    def fetch(
        self,
        user_id: str,
        kind: Optional[Kind],
        window: DateWindow,
    ) -> List[TransactionRecord]:
        """Return the records inside ``window`` ordered by ``occurred_on``."""

    def sum_by_category(self, user_id: str, kind: Kind, window: DateWindow) -> Dict[str, Decimal]:
        return category_totals(self.fetch(user_id, kind, window))
