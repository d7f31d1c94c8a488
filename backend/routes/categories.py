"""Category management routes."""

import logging

from fastapi import APIRouter, Depends

from dependencies import CurrentUser, Services, get_current_user, get_services
from schemas import CategoryRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories")


@router.get("")
async def list_categories(
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    """Categories split into income and expense, with counts."""
    return await services.categories.list_grouped(current.user.uid)


@router.post("", status_code=201)
async def create_category(
    body: CategoryRequest,
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    return await services.categories.create(current.user.uid, body.name, body.type, body.icon)


@router.put("/{category_id}")
async def update_category(
    category_id: str,
    body: CategoryRequest,
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    return await services.categories.update(current.user.uid, category_id, body.name, body.type, body.icon)


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    await services.categories.delete(current.user.uid, category_id)
    return {"status": "deleted", "id": category_id}
