"""Dashboard and analytics aggregates over a user's transaction list.

All totals use the absolute amount; only the balance trend follows the
signed amount. Series are returned as {"labels": [...], "values": [...]}
so any charting surface can render them.
"""

import logging
from datetime import date
from typing import Any

import pandas as pd

from services.categories import category_icon

logger = logging.getLogger(__name__)

COLUMNS = ["id", "description", "amount", "type", "category", "date"]
RECENT_LIMIT = 5
TREND_POINTS = 7


def _money(value: Any) -> float:
    return round(float(value), 2)


def _frame(transactions: list[dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(transactions, columns=COLUMNS)
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0).astype(float)
    df["abs_amount"] = df["amount"].abs()
    df["category"] = df["category"].fillna("Uncategorized").astype(str)
    df["date"] = df["date"].fillna("").astype(str)
    return df


def _series(values: pd.Series, labels: list[str] | None = None) -> dict[str, list]:
    return {
        "labels": labels if labels is not None else [str(k) for k in values.index],
        "values": [_money(v) for v in values.tolist()],
    }


def balance_trend(transactions: list[dict[str, Any]], points: int = TREND_POINTS) -> dict[str, list]:
    """Running signed balance in date order, last ``points`` entries."""
    if not transactions:
        return {"labels": ["No Data"], "values": [0]}

    df = _frame(transactions).sort_values("date", kind="stable")
    running = df["amount"].cumsum()
    tail = df.assign(balance=running).tail(points)
    return {
        "labels": tail["date"].tolist(),
        "values": [_money(v) for v in tail["balance"].tolist()],
    }


def recent_transactions(transactions: list[dict[str, Any]], limit: int = RECENT_LIMIT) -> list[dict[str, Any]]:
    newest = sorted(transactions, key=lambda t: t.get("date") or "", reverse=True)[:limit]
    return [{**tx, "icon": category_icon(tx.get("category", ""))} for tx in newest]


def dashboard_summary(transactions: list[dict[str, Any]], today: date) -> dict[str, Any]:
    df = _frame(transactions)
    is_income = df["type"] == "income"
    is_expense = df["type"] == "expense"
    in_month = df["date"].str.startswith(today.strftime("%Y-%m"))

    total_income = df.loc[is_income, "abs_amount"].sum()
    total_expense = df.loc[is_expense, "abs_amount"].sum()

    return {
        "total_balance": _money(total_income - total_expense),
        "month_income": _money(df.loc[is_income & in_month, "abs_amount"].sum()),
        "month_expense": _money(df.loc[is_expense & in_month, "abs_amount"].sum()),
        "recent_transactions": recent_transactions(transactions),
        "balance_trend": balance_trend(transactions),
    }


def analytics_summary(transactions: list[dict[str, Any]]) -> dict[str, Any]:
    df = _frame(transactions)
    expenses = df[df["type"] == "expense"]

    by_category = expenses.groupby("category", sort=False)["abs_amount"].sum()
    if by_category.empty:
        top_category = {"name": None, "amount": 0.0}
    else:
        # idxmax keeps the first category on ties
        name = by_category.idxmax()
        top_category = {"name": name, "amount": _money(by_category[name])}

    dated = expenses[expenses["date"].str.match(r"^\d{4}-\d{2}")]
    monthly = dated.groupby(dated["date"].str[:7])["abs_amount"].sum().sort_index()
    month_labels = [pd.Timestamp(f"{month}-01").strftime("%b %Y") for month in monthly.index]

    return {
        "total_income": _money(df.loc[df["type"] == "income", "abs_amount"].sum()),
        "total_expense": _money(expenses["abs_amount"].sum()),
        "top_category": top_category,
        "by_category": _series(by_category),
        "monthly_expenses": _series(monthly, labels=month_labels),
    }
