import logging

from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import RedirectResponse
from fastapi_sso.sso.google import GoogleSSO
from sqlmodel import select

from app.api import deps
from app.core.config import settings
from app.core.security import create_access_token
from app.models.user import User
from app.schemas.token import Token

logger = logging.getLogger(__name__)

router = APIRouter()

CALLBACK_URL = f"{settings.SSO_REDIRECT_BASE_URL}{settings.API_V1_STR}/auth/callback/google"

google_sso = None
if settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET:
    google_sso = GoogleSSO(
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        redirect_uri=CALLBACK_URL,
        allow_insecure_http=CALLBACK_URL.startswith("http://"),
    )
else:
    logger.warning("Google SSO is not configured; login endpoints are disabled")


def _require_sso() -> GoogleSSO:
    if not google_sso:
        raise HTTPException(status_code=500, detail="Google SSO not configured")
    return google_sso


@router.get("/login/google", response_class=RedirectResponse)
async def google_login():
    """Generate login URL and redirect"""
    sso = _require_sso()
    return await sso.get_login_redirect(redirect_uri=CALLBACK_URL)


@router.get("/callback/google", response_model=Token)
async def google_callback(request: Request, session: deps.SessionDep):
    """Process login response from Google and return JWT"""
    sso = _require_sso()

    try:
        user_info = await sso.verify_and_process(request)
    except Exception as e:
        logger.warning("Google SSO verification failed: %s", e)
        raise HTTPException(status_code=400, detail=f"SSO Error: {str(e)}")

    if not user_info or not user_info.email:
        raise HTTPException(status_code=400, detail="No email returned from Google")

    user = session.exec(select(User).where(User.email == user_info.email)).first()
    if not user:
        user = User(
            email=user_info.email,
            full_name=user_info.display_name,
            picture=user_info.picture
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        logger.info("Created user %s from Google SSO", user.id)

    return {
        "access_token": create_access_token(user.id),
        "token_type": "bearer",
        "user": user
    }
