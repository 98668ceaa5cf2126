from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from finance_reports.db.source import TransactionSource
from finance_reports.models.transaction import DateWindow, Kind, TransactionRecord


class InMemoryTransactionSource(TransactionSource):
    """Serves a finite, already loaded batch of records per user."""

    def __init__(self, records: Optional[Dict[str, Iterable[TransactionRecord]]] = None) -> None:
        self._records: Dict[str, List[TransactionRecord]] = defaultdict(list)
        for user_id, items in (records or {}).items():
            self._records[user_id].extend(items)

    def fetch(
        self,
        user_id: str,
        kind: Optional[Kind],
        window: DateWindow,
    ) -> List[TransactionRecord]:
        matches = [
            record
            for record in self._records.get(user_id, [])
            if window.contains(record.occurred_on) and (kind is None or record.kind is kind)
        ]
        return sorted(matches, key=lambda record: record.occurred_on)
