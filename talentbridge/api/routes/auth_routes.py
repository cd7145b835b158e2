"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from talentbridge.api.deps import get_account_service
from talentbridge.schemas.schemas import TokenResponse, UserResponse
from talentbridge.services.account_service import AccountService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    body: Dict[str, Any] = Body(...),
    accounts: AccountService = Depends(get_account_service),
):
    """
    Register a new user account.

    After registration, login to get access token, then create profile.
    """
    return accounts.register(body)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: Dict[str, Any] = Body(...),
    accounts: AccountService = Depends(get_account_service),
):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    return accounts.login(body)
