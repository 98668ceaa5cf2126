"""
finance_reports
~~~~~~~~~~~~~~~

Aggregation and trend analysis for personal finance records. The
PeriodSummarizer and TrendAnalyzer classes are shared by the HTTP routes and
any batch job that needs the same numbers.
"""

from .core.errors import DataSourceUnavailable, FinanceReportsError, InvalidArgument
from .db.memory import InMemoryTransactionSource
from .db.source import TransactionSource
from .models.report import PeriodSummary, TrendReport
from .models.transaction import DateWindow, Kind, TransactionRecord
from .utils.summary import PeriodSummarizer
from .utils.trends import TrendAnalyzer

__all__ = [
    "DataSourceUnavailable",
    "DateWindow",
    "FinanceReportsError",
    "InMemoryTransactionSource",
    "InvalidArgument",
    "Kind",
    "PeriodSummarizer",
    "PeriodSummary",
    "TransactionRecord",
    "TransactionSource",
    "TrendAnalyzer",
    "TrendReport",
]
