"""Transaction routes: list, view, add, edit, delete.

GET routes take ``refresh=true`` to bypass the per-user cache.
"""

import logging

from fastapi import APIRouter, Depends, Query

from dependencies import CurrentUser, Services, get_current_user, get_services
from schemas import TransactionRequest
from services.categories import category_icon

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions")


def _with_icon(tx: dict) -> dict:
    return {**tx, "icon": category_icon(tx.get("category", ""))}


@router.get("")
async def list_transactions(
    refresh: bool = Query(False),
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    transactions = await services.transactions.list_transactions(current.user.uid, force_refresh=refresh)
    return {
        "transactions": [_with_icon(tx) for tx in transactions],
        "count": len(transactions),
    }


@router.post("", status_code=201)
async def create_transaction(
    body: TransactionRequest,
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    tx = await services.transactions.create_transaction(
        current.user.uid, body.description, body.amount, body.category, body.type, body.date
    )
    return _with_icon(tx)


@router.get("/{tx_id}")
async def get_transaction(
    tx_id: str,
    refresh: bool = Query(False),
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    tx = await services.transactions.get_transaction(current.user.uid, tx_id, force_refresh=refresh)
    return _with_icon(tx)


@router.put("/{tx_id}")
async def update_transaction(
    tx_id: str,
    body: TransactionRequest,
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    tx = await services.transactions.update_transaction(
        current.user.uid, tx_id, body.description, body.amount, body.category, body.type, body.date
    )
    return _with_icon(tx)


@router.delete("/{tx_id}")
async def delete_transaction(
    tx_id: str,
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    await services.transactions.delete_transaction(current.user.uid, tx_id)
    return {"status": "deleted", "id": tx_id}
