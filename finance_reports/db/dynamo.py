from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError

from finance_reports.core.config import settings
from finance_reports.core.errors import DataSourceUnavailable
from finance_reports.db.source import TransactionSource
from finance_reports.models.transaction import DateWindow, Kind, TransactionRecord

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


def get_transactions_table():
    """Build the Transactions table reference from settings."""
    dynamodb = boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)
    return dynamodb.Table(settings.DYNAMO_TRANSACTIONS_TABLE)


class DynamoTransactionSource(TransactionSource):
    """
    Reads transactions from a table keyed by ``user_id`` (PK) and
    ``transaction_id`` (SK). The sort key starts with the record's ISO date,
    e.g. ``2025-01-05T09:30:00.000000``, so a date window maps onto a key range.
    """

    def __init__(self, table: Any = None) -> None:
        self._table = table if table is not None else get_transactions_table()

    def fetch(
        self,
        user_id: str,
        kind: Optional[Kind],
        window: DateWindow,
    ) -> List[TransactionRecord]:
        # SK values for the last day sort after its bare ISO date, so bound by the next day.
        upper = (window.end_date + timedelta(days=1)).isoformat()
        query_kwargs: Dict[str, Any] = {
            "KeyConditionExpression": Key("user_id").eq(user_id)
            & Key("transaction_id").between(window.start_date.isoformat(), upper),
        }
        if kind is not None:
            query_kwargs["FilterExpression"] = Attr("kind").eq(kind.value)

        items: List[Dict[str, Any]] = []
        try:
            while True:
                response = self._table.query(**query_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                query_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error(f"Transaction query failed for user {user_id}: {e.response['Error']['Message']}")
            raise DataSourceUnavailable(f"Could not read transactions: {e.response['Error']['Message']}") from e
        except BotoCoreError as e:
            logger.error(f"Transaction query failed for user {user_id}: {str(e)}")
            raise DataSourceUnavailable(f"Could not read transactions: {str(e)}") from e

        records = [_to_record(item) for item in items]
        records = [record for record in records if window.contains(record.occurred_on)]
        logger.debug(f"Fetched {len(records)} transactions for user {user_id} in {window}")
        return sorted(records, key=lambda record: record.occurred_on)


def _to_record(item: Dict[str, Any]) -> TransactionRecord:
    """
    Map a DynamoDB item onto a TransactionRecord. Amounts stay Decimal as
    returned by boto3; a missing date falls back to the sort key prefix.
    """
    occurred_on = item.get("occurred_on") or item["transaction_id"][:10]
    return TransactionRecord(
        amount=item["amount"],
        kind=item["kind"],
        occurred_on=date.fromisoformat(str(occurred_on)[:10]),
        category_name=item.get("category_name") or UNCATEGORIZED,
        description=item.get("description") or "",
    )
