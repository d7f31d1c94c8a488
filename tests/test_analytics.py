"""Tests for dashboard and analytics aggregation."""

from datetime import date

from services.analytics import analytics_summary, balance_trend, dashboard_summary, recent_transactions


def _tx(tx_id, amount, tx_type, category, day, description=""):
    return {
        "id": tx_id,
        "description": description or tx_id,
        "amount": amount,
        "type": tx_type,
        "category": category,
        "date": day,
        "userId": "u1",
    }


TRANSACTIONS = [
    _tx("t1", 3000.0, "income", "Salary", "2026-03-01"),
    _tx("t2", -45.5, "expense", "Food", "2026-03-03"),
    _tx("t3", -120.0, "expense", "Bills", "2026-02-10"),
    _tx("t4", -30.0, "expense", "Food", "2026-02-11"),
    _tx("t5", 400.0, "income", "Freelance", "2026-02-20"),
    _tx("t6", -60.0, "expense", "Transportation", "2026-01-05"),
]


class TestDashboardSummary:
    def test_totals(self) -> None:
        summary = dashboard_summary(TRANSACTIONS, today=date(2026, 3, 15))
        assert summary["total_balance"] == 3144.5
        assert summary["month_income"] == 3000.0
        assert summary["month_expense"] == 45.5

    def test_empty(self) -> None:
        summary = dashboard_summary([], today=date(2026, 3, 15))
        assert summary["total_balance"] == 0
        assert summary["month_income"] == 0
        assert summary["recent_transactions"] == []
        assert summary["balance_trend"] == {"labels": ["No Data"], "values": [0]}

    def test_uses_absolute_amounts(self) -> None:
        # stored sign does not matter for totals, only the type tag
        txs = [_tx("a", 50.0, "expense", "Food", "2026-03-02")]
        assert dashboard_summary(txs, today=date(2026, 3, 15))["total_balance"] == -50.0


class TestRecentTransactions:
    def test_five_most_recent_with_icons(self) -> None:
        recent = recent_transactions(TRANSACTIONS)
        assert [t["id"] for t in recent] == ["t2", "t1", "t5", "t4", "t3"]
        assert recent[0]["icon"] == "🍽️"
        assert recent[2]["icon"] == "💼"

    def test_unknown_category_icon(self) -> None:
        recent = recent_transactions([_tx("x", -1.0, "expense", "Pets", "2026-01-01")])
        assert recent[0]["icon"] == "💳"


class TestBalanceTrend:
    def test_running_balance_last_points(self) -> None:
        trend = balance_trend(TRANSACTIONS, points=3)
        assert trend["labels"] == ["2026-02-20", "2026-03-01", "2026-03-03"]
        assert trend["values"] == [190.0, 3190.0, 3144.5]

    def test_fewer_than_points(self) -> None:
        trend = balance_trend([_tx("a", 10.0, "income", "Salary", "2026-01-01")])
        assert trend == {"labels": ["2026-01-01"], "values": [10.0]}


class TestAnalyticsSummary:
    def test_totals_and_top_category(self) -> None:
        summary = analytics_summary(TRANSACTIONS)
        assert summary["total_income"] == 3400.0
        assert summary["total_expense"] == 255.5
        assert summary["top_category"] == {"name": "Bills", "amount": 120.0}

    def test_by_category_in_first_seen_order(self) -> None:
        summary = analytics_summary(TRANSACTIONS)
        assert summary["by_category"] == {
            "labels": ["Food", "Bills", "Transportation"],
            "values": [75.5, 120.0, 60.0],
        }

    def test_monthly_expenses_sorted_with_labels(self) -> None:
        summary = analytics_summary(TRANSACTIONS)
        assert summary["monthly_expenses"] == {
            "labels": ["Jan 2026", "Feb 2026", "Mar 2026"],
            "values": [60.0, 150.0, 45.5],
        }

    def test_tie_goes_to_first_category(self) -> None:
        txs = [
            _tx("a", -10.0, "expense", "Food", "2026-01-01"),
            _tx("b", -10.0, "expense", "Bills", "2026-01-02"),
        ]
        assert analytics_summary(txs)["top_category"]["name"] == "Food"

    def test_no_expenses(self) -> None:
        summary = analytics_summary([_tx("a", 10.0, "income", "Salary", "2026-01-01")])
        assert summary["top_category"] == {"name": None, "amount": 0.0}
        assert summary["by_category"] == {"labels": [], "values": []}
        assert summary["monthly_expenses"] == {"labels": [], "values": []}
