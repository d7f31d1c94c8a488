"""Account settings routes: currency preference, CSV export and data deletion."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from dependencies import CurrentUser, Services, get_current_user, get_services
from schemas import PreferencesRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings")


@router.get("/preferences")
async def get_preferences(
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    return await services.profiles.get_preferences(current.user)


@router.put("/preferences")
async def update_preferences(
    body: PreferencesRequest,
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    return await services.profiles.update_preferences(current.user, body.currency)


@router.get("/export")
async def export_transactions(
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> Response:
    """All of the user's transactions as a CSV download."""
    content = await services.profiles.export_csv(current.user.uid)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="transactions.csv"'},
    )


@router.delete("/data")
async def delete_data(
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    """Delete every transaction, then sign the user out."""
    deleted = await services.profiles.delete_account_data(current.user, current.token)
    logger.info("User %s deleted %d transactions and signed out", current.user.uid, deleted)
    return {"status": "deleted", "deleted_transactions": deleted}
