"""Dashboard and analytics routes. Aggregates only, no rendering."""

import logging

from fastapi import APIRouter, Depends, Query

from dependencies import CurrentUser, Services, get_current_user, get_services
from services.analytics import analytics_summary, dashboard_summary
from services.profile import format_currency

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard")
async def dashboard(
    refresh: bool = Query(False),
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    """Balance, this month's totals, recent activity and the balance trend."""
    user = current.user
    transactions = await services.transactions.list_transactions(user.uid, force_refresh=refresh)
    summary = dashboard_summary(transactions, today=services.transactions.today())
    return {"user_name": user.name, **summary}


@router.get("/analytics")
async def analytics(
    refresh: bool = Query(False),
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    """Income/expense totals, top category and chart series."""
    user = current.user
    transactions = await services.transactions.list_transactions(user.uid, force_refresh=refresh)
    summary = analytics_summary(transactions)

    currency = (await services.profiles.get_preferences(user))["currency"]
    summary["currency"] = currency
    summary["display"] = {
        "total_income": format_currency(summary["total_income"], currency),
        "total_expense": format_currency(summary["total_expense"], currency),
        "top_category": format_currency(summary["top_category"]["amount"], currency),
    }
    return summary
