from typing import Optional

from fastapi import Header, HTTPException

from sunny_auto.core.config import settings
from sunny_auto.core.logger import logger
from sunny_auto.models.profile import Account
from sunny_auto.services.db_service import db_service


async def verify_admin_secret(x_admin_secret: Optional[str] = Header(None)):
    """
    Guard for the admin-prefixed endpoints.
    The admin dashboard sends the shared secret in the `X-Admin-Secret` header.
    """
    if not settings.ADMIN_SECRET:
        # Local development without a secret configured
        return True

    if x_admin_secret != settings.ADMIN_SECRET:
        logger.warning("⚠️ Rejected admin request with invalid secret")
        raise HTTPException(status_code=403, detail="Invalid admin secret")
    return True


async def get_current_account(authorization: Optional[str] = Header(None)) -> Account:
    """
    Resolves the Supabase session token from the `Authorization: Bearer ...` header
    into the signed-in account. Session handling itself stays with Supabase auth.
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not signed in")

    jwt = authorization.split(" ", 1)[1].strip()
    account = await db_service.get_account(jwt)
    if not account:
        raise HTTPException(status_code=401, detail="Session expired, please sign in again")
    return account
