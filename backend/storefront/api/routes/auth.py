from typing import Any

from fastapi import APIRouter, Body, Depends

from storefront.api.deps import get_account_service
from storefront.services.account_service import AccountService

router = APIRouter()


@router.post("/signup")
async def signup(
    body: dict[str, Any] = Body(...),
    accounts: AccountService = Depends(get_account_service),
):
    """Create an account with the default ``user`` role."""
    return await accounts.signup(body)
