"""Platform admin authentication endpoints."""
from fastapi import APIRouter, HTTPException, Response

from wellpulse.core import config
from wellpulse.core.logging_config import get_logger
from wellpulse.core.security import create_access_token, verify_admin_password
from wellpulse.schemas import AdminLoginRequest, SuccessResponse

logger = get_logger(__name__)
router = APIRouter()

COOKIE_NAME = "admin_token"


@router.post("/login", response_model=SuccessResponse)
async def admin_login(request: AdminLoginRequest, response: Response) -> SuccessResponse:
    """
    Authenticate the platform admin and set the JWT in an httpOnly cookie.

    The cookie guards domain administration, license management and manual
    report emails. It is ``secure`` only in production.

    Raises:
        HTTPException: 401 if the password is wrong
    """
    if not verify_admin_password(request.password):
        logger.warning("admin_login_failed")
        raise HTTPException(status_code=401, detail="Invalid password")

    access_token = create_access_token(data={"is_admin": True})
    response.set_cookie(
        key=COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=config.settings.ENVIRONMENT == "production",
        samesite="lax",
        max_age=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    logger.info("admin_login_succeeded")
    return SuccessResponse(success=True, message="Logged in successfully")


@router.post("/logout", response_model=SuccessResponse)
async def admin_logout(response: Response) -> SuccessResponse:
    """Clear the admin cookie. Safe to call when not logged in."""
    response.delete_cookie(key=COOKIE_NAME)
    return SuccessResponse(success=True, message="Logged out successfully")
