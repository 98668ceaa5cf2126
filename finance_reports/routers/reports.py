import logging
from datetime import date
from functools import lru_cache
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from finance_reports.core.config import settings
from finance_reports.core.errors import DataSourceUnavailable, InvalidArgument
from finance_reports.db.dynamo import DynamoTransactionSource
from finance_reports.db.source import TransactionSource
from finance_reports.models.transaction import DateWindow
from finance_reports.utils.summary import PeriodSummarizer
from finance_reports.utils.trends import TrendAnalyzer

router = APIRouter()
logger = logging.getLogger(__name__)


@lru_cache()
def get_transaction_source() -> TransactionSource:
    return DynamoTransactionSource()


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    # Authentication happens upstream; the gateway forwards the resolved user.
    if not x_user_id:
        raise HTTPException(status_code=401, detail="User identity required")
    return x_user_id


def _summary_response(source: TransactionSource, user_id: str, window: DateWindow) -> Dict:
    summarizer = PeriodSummarizer(source, top_limit=settings.TOP_CATEGORY_LIMIT)
    try:
        summary = summarizer.summarize(user_id, window)
    except DataSourceUnavailable as e:
        logger.error(f"Error reading transactions for user {user_id}: {str(e)}")
        raise HTTPException(status_code=503, detail=str(e))
    return summary.to_dict()


@router.get("/summary")
def period_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    as_of: Optional[date] = None,
    user_id: str = Depends(get_current_user_id),
    source: TransactionSource = Depends(get_transaction_source),
) -> Dict:
    """
    Summary for ``[start_date, end_date]``. Missing bounds default to the
    month containing ``as_of`` (today when omitted).
    """
    current_month = DateWindow.month_of(as_of or date.today())
    try:
        window = DateWindow(start_date or current_month.start_date, end_date or current_month.end_date)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Generating period summary for user_id: {user_id}, {window.start_date} to {window.end_date}")
    return _summary_response(source, user_id, window)


@router.get("/monthly/{month}")
def monthly_summary(
    month: str,
    user_id: str = Depends(get_current_user_id),
    source: TransactionSource = Depends(get_transaction_source),
) -> Dict:
    """
    Summary for the given month (e.g., '2025-11').
    """
    try:
        window = DateWindow.parse_month(month)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Generating monthly summary for user_id: {user_id}, month: {month}")
    return {"month": month, **_summary_response(source, user_id, window)}


@router.get("/trends")
def trend_report(
    months: int = Query(default=settings.DEFAULT_TREND_MONTHS, ge=1, le=settings.MAX_TREND_MONTHS),
    as_of: Optional[date] = None,
    user_id: str = Depends(get_current_user_id),
    source: TransactionSource = Depends(get_transaction_source),
) -> Dict:
    analyzer = TrendAnalyzer(source, top_categories=settings.TOP_CATEGORY_LIMIT)
    try:
        report = analyzer.analyze(user_id, months, as_of=as_of or date.today())
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataSourceUnavailable as e:
        logger.error(f"Error reading transactions for user {user_id}: {str(e)}")
        raise HTTPException(status_code=503, detail=str(e))

    logger.info(f"Trend report generated for user {user_id} over {months} months")
    return {"months": months, **report.to_dict()}
