"""Authentication routes: sign up, sign in, sign out, password reset."""

import logging

from fastapi import APIRouter, Depends

from dependencies import CurrentUser, Services, get_current_user, get_services
from schemas import PasswordResetRequest, SignInRequest, SignUpRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


@router.post("/sign-up", status_code=201)
async def sign_up(body: SignUpRequest, services: Services = Depends(get_services)) -> dict:
    session = await services.accounts.sign_up(body.name, body.email, body.password)
    return {"token": session.token, "user": session.user.to_dict()}


@router.post("/sign-in")
async def sign_in(body: SignInRequest, services: Services = Depends(get_services)) -> dict:
    session = await services.accounts.sign_in(body.email, body.password)
    return {"token": session.token, "user": session.user.to_dict()}


@router.post("/sign-out")
async def sign_out(
    current: CurrentUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict:
    await services.accounts.sign_out(current.user, current.token)
    return {"status": "signed_out"}


@router.post("/password-reset")
async def password_reset(body: PasswordResetRequest, services: Services = Depends(get_services)) -> dict:
    await services.accounts.request_password_reset(body.email)
    return {"status": "sent"}


@router.get("/me")
async def me(current: CurrentUser = Depends(get_current_user)) -> dict:
    return {**current.user.to_dict(), "name": current.user.name}
