import logging
from typing import Generator, Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlmodel import Session

from app.core.config import settings
from app.core.db import engine
from app.core.exceptions import Unauthenticated
from app.core.security import decode_access_token
from app.models.user import User

logger = logging.getLogger(__name__)

# Tokens are minted by the Google SSO callback; the tokenUrl only feeds the OpenAPI docs
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login/google"
)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_session)]
TokenDep = Annotated[str, Depends(reusable_oauth2)]


def get_current_user(session: SessionDep, token: TokenDep) -> User:
    try:
        payload = decode_access_token(token)
        # sub holds the user id as a string
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )

    user = session.get(User, user_id)
    if not user:
        logger.info("Token presented for unknown user %s", user_id)
        raise Unauthenticated()
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
