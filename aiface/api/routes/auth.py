import logging
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from aiface.core import config
from aiface.core.auth_dependency import get_current_user, get_db
from aiface.core.security import create_access_token
from aiface.db.models.user import User
from aiface.schemas.auth import UserResponse
from aiface.services import google_auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/google")
def google_login():
    """Redirect to Google's account chooser."""
    logger.debug("Initiating Google OAuth flow")
    return RedirectResponse(google_auth_service.build_authorization_url())


@router.get("/google/callback")
def google_callback(code: str = None, db: Session = Depends(get_db)):
    """
    Finish Google sign-in and hand the session token to the web client.
    
    Any failure sends the browser back to the login page.
    """
    login_url = f"{config.CLIENT_URL}/#/login"
    if not code:
        return RedirectResponse(login_url)

    try:
        profile = google_auth_service.exchange_code_for_profile(code)
        user = google_auth_service.get_or_create_user(db, profile)
    except Exception as e:
        db.rollback()
        logger.error(f"Google sign-in failed: {type(e).__name__}: {e}", exc_info=True)
        return RedirectResponse(login_url)

    token = create_access_token({
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
    })
    logger.info(f"User signed in: user_id={user.id}")
    return RedirectResponse(f"{config.CLIENT_URL}/#/auth-success?token={token}")


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)
