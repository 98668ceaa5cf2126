from datetime import date
from decimal import Decimal

import pytest

from finance_reports.core.errors import InvalidArgument
from finance_reports.db.memory import InMemoryTransactionSource
from finance_reports.models.transaction import DateWindow, Kind, TransactionRecord
from finance_reports.utils.trends import TrendAnalyzer, month_windows

USER = "user-1"
AS_OF = date(2025, 6, 18)


def tx(kind, amount, day, category):
    return TransactionRecord(amount=Decimal(str(amount)), kind=kind, occurred_on=day, category_name=category)


def six_month_history():
    # Oldest month (January) earns 3000 and spends 1000; each month adds 1000 / 500.
    records = []
    for i in range(6):
        month_start = date(2025, i + 1, 1)
        records.append(tx(Kind.INCOME, 3000 + i * 1000, month_start, "Salary"))
        records.append(tx(Kind.EXPENSE, 1000 + i * 500, month_start, "Food"))
    return records


def analyze(records, months=6, as_of=AS_OF, **kwargs):
    source = InMemoryTransactionSource({USER: records})
    return TrendAnalyzer(source, **kwargs).analyze(USER, months, as_of=as_of)


def test_month_windows_oldest_first():
    windows = month_windows(date(2025, 2, 10), 3)
    assert windows == [
        DateWindow(date(2024, 12, 1), date(2024, 12, 31)),
        DateWindow(date(2025, 1, 1), date(2025, 1, 31)),
        DateWindow(date(2025, 2, 1), date(2025, 2, 28)),
    ]


def test_monthly_trends_rows():
    report = analyze(six_month_history())
    monthly = report.monthly_trends
    assert len(monthly) == 6
    assert [m.date for m in monthly] == sorted(m.date for m in monthly)
    assert monthly[0].month == "January 2025"
    assert monthly[0].month_short == "Jan 25"
    assert monthly[-1].income == 8000
    assert monthly[-1].expenses == 3500
    assert monthly[-1].net == 4500


def test_derived_series_follow_monthly_rows():
    report = analyze(six_month_history())
    incomes = [value for _, value in report.income_trend]
    expenses = [value for _, value in report.expense_trend]
    assert incomes == [3000, 4000, 5000, 6000, 7000, 8000]
    assert expenses == sorted(expenses)
    assert report.savings_trend[0] == ("Jan 25", Decimal("2000"))
    assert len(report.savings_trend) == 6


def test_averages():
    report = analyze(six_month_history())
    assert report.averages.monthly_income == Decimal("5500.0")
    assert report.averages.monthly_expenses == Decimal("2250.0")
    assert report.averages.monthly_savings == Decimal("3250.0")


def test_growth_rates():
    report = analyze(six_month_history())
    assert set(report.growth_rates) == {"income", "expenses", "savings"}
    assert float(report.growth_rates["income"]) == pytest.approx(166.67, abs=0.1)
    assert report.growth_rates["expenses"] == Decimal("250.00")
    assert report.growth_rates["savings"] == Decimal("125.00")


def test_growth_rates_zero_when_first_month_empty():
    report = analyze([])
    assert report.growth_rates == {"income": 0, "expenses": 0, "savings": 0}
    assert report.averages.monthly_income == 0


def test_growth_rates_empty_for_single_month():
    report = analyze(six_month_history(), months=1)
    assert len(report.monthly_trends) == 1
    assert report.growth_rates == {}
    assert report.to_dict()["growth_rates"] == {}


def test_custom_month_range():
    report = analyze(six_month_history(), months=3)
    assert [m.month_short for m in report.monthly_trends] == ["Apr 25", "May 25", "Jun 25"]
    assert float(report.growth_rates["income"]) == pytest.approx(33.33, abs=0.01)


def test_category_trends_for_top_expense_categories():
    records = six_month_history()
    records.append(tx(Kind.EXPENSE, 40, date(2025, 3, 9), "Transport"))
    report = analyze(records)

    names = [c.name for c in report.category_trends]
    assert names == ["Food", "Transport"]
    food = report.category_trends[0]
    assert [label for label, _ in food.data] == [m.month_short for m in report.monthly_trends]
    assert [value for _, value in food.data] == [1000, 1500, 2000, 2500, 3000, 3500]
    transport = dict(report.category_trends[1].data)
    assert transport["Mar 25"] == 40
    assert transport["Feb 25"] == 0


def test_category_trends_limited_to_top_five():
    records = six_month_history()
    for i in range(10):
        records.append(tx(Kind.EXPENSE, 100 + i, date(2025, 5, 2), f"Category {i}"))
    report = analyze(records)

    names = [c.name for c in report.category_trends]
    assert len(names) == 5
    assert names == ["Food", "Category 9", "Category 8", "Category 7", "Category 6"]


def test_category_ranking_ignores_records_outside_span():
    records = six_month_history()
    records.append(tx(Kind.EXPENSE, 99999, date(2024, 12, 31), "Travel"))
    report = analyze(records)
    assert [c.name for c in report.category_trends] == ["Food"]
    assert report.monthly_trends[0].expenses == 1000


def test_category_trends_empty_without_expenses():
    records = [tx(Kind.INCOME, 100, date(2025, 6, 1), "Salary")]
    report = analyze(records, months=2)
    assert report.category_trends == ()


def test_year_boundary():
    records = [
        tx(Kind.INCOME, 1000, date(2024, 12, 31), "Salary"),
        tx(Kind.INCOME, 2000, date(2025, 1, 1), "Salary"),
    ]
    report = analyze(records, months=2, as_of=date(2025, 1, 10))
    assert [m.month for m in report.monthly_trends] == ["December 2024", "January 2025"]
    assert report.growth_rates["income"] == Decimal("100.00")


@pytest.mark.parametrize("months", [0, -3, 2.5, True, "6"])
def test_invalid_months_rejected(months):
    source = InMemoryTransactionSource()
    with pytest.raises(InvalidArgument):
        TrendAnalyzer(source).analyze(USER, months, as_of=AS_OF)


def test_reads_span_once_per_call():
    calls = []

    class CountingSource(InMemoryTransactionSource):
        def fetch(self, user_id, kind, window):
            calls.append((kind, window))
            return super().fetch(user_id, kind, window)

    source = CountingSource({USER: six_month_history()})
    TrendAnalyzer(source).analyze(USER, 6, as_of=AS_OF)

    span = DateWindow(date(2025, 1, 1), date(2025, 6, 30))
    assert calls == [(None, span), (Kind.EXPENSE, span)]


def test_to_dict_shapes():
    data = analyze(six_month_history()).to_dict()
    assert set(data) == {
        "monthly_trends",
        "income_trend",
        "expense_trend",
        "savings_trend",
        "category_trends",
        "averages",
        "growth_rates",
    }
    assert data["monthly_trends"][0] == {
        "month": "January 2025",
        "month_short": "Jan 25",
        "date": "2025-01-01",
        "income": 3000,
        "expenses": 1000,
        "net": 2000,
    }
    assert data["income_trend"][-1] == ["Jun 25", 8000]
    assert data["averages"]["monthly_income"] == 5500
    assert data["growth_rates"]["income"] == 166.67


def test_growth_rates_are_read_only():
    report = analyze(six_month_history())
    with pytest.raises(TypeError):
        report.growth_rates["income"] = Decimal("0")
    with pytest.raises(TypeError):
        analyze(six_month_history(), months=1).growth_rates["income"] = Decimal("0")


def test_windows_before_year_one_rejected():
    source = InMemoryTransactionSource()
    with pytest.raises(InvalidArgument):
        TrendAnalyzer(source).analyze(USER, 3, as_of=date(1, 2, 1))
