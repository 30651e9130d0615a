"""
Google sign-in: authorization URL, code exchange and user provisioning.
"""
import logging
from typing import Any, Dict
from urllib.parse import urlencode

import requests
from sqlalchemy.orm import Session

from aiface.core import config
from aiface.core.logging_config import sanitize_log_data
from aiface.db.models.user import User

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
REQUEST_TIMEOUT_SECONDS = 10


def build_authorization_url() -> str:
    params = {
        "client_id": config.GOOGLE_CLIENT_ID or "",
        "redirect_uri": config.GOOGLE_REDIRECT_URI,
        "response_type": "code",
        "scope": "openid email profile",
        "prompt": "select_account",
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


def exchange_code_for_profile(code: str) -> Dict[str, Any]:
    """
    Exchange an authorization code for the user's Google profile.

    Returns:
        OpenID userinfo dict (sub, email, name, picture)

    Raises:
        requests.RequestException: On any HTTP failure
    """
    token_response = requests.post(
        GOOGLE_TOKEN_URL,
        data={
            "code": code,
            "client_id": config.GOOGLE_CLIENT_ID,
            "client_secret": config.GOOGLE_CLIENT_SECRET,
            "redirect_uri": config.GOOGLE_REDIRECT_URI,
            "grant_type": "authorization_code",
        },
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    token_response.raise_for_status()
    token_payload = token_response.json()
    logger.debug(f"Google token response: {sanitize_log_data(token_payload)}")
    access_token = token_payload["access_token"]

    profile_response = requests.get(
        GOOGLE_USERINFO_URL,
        headers={"Authorization": f"Bearer {access_token}"},
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    profile_response.raise_for_status()
    profile = profile_response.json()
    logger.debug(f"Google profile fetched: {sanitize_log_data(profile)}")
    return profile


def get_or_create_user(db: Session, profile: Dict[str, Any]) -> User:
    """Find the user for a Google profile, creating it on first sign-in."""
    google_id = profile.get("sub")
    email = profile.get("email")
    if not google_id or not email:
        raise ValueError("Google profile is missing sub or email")

    user = db.query(User).filter(User.google_id == google_id).first()
    if user:
        return user

    user = User(
        google_id=google_id,
        email=email,
        name=profile.get("name"),
        profile_picture=profile.get("picture"),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User created from Google sign-in: user_id={user.id}")
    return user
