"""Bearer token verification for tokens issued by the identity provider.

Login and the OAuth dance happen elsewhere; this service only checks the
signed token and makes sure a User row exists for its subject.
"""

import logging

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .database import get_db
from .errors import Unauthorized
from .models import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    user_id: str
    email: str | None = None
    name: str | None = None


def verify_token(token: str, settings: Settings) -> TokenData:
    """Verify and decode a JWT.

    Raises:
        Unauthorized: If the token is expired, malformed or has no subject.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token")

    # Accept both 'sub' (standard) and 'user_id'
    user_id = payload.get("sub") or payload.get("user_id")
    if not user_id:
        raise Unauthorized("Invalid token: missing user ID")

    return TokenData(user_id=str(user_id), email=payload.get("email"), name=payload.get("name"))


def get_token_data(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> TokenData:
    """FastAPI dependency returning the verified token claims."""
    if credentials is None:
        raise Unauthorized()
    return verify_token(credentials.credentials, settings)


def get_current_user(
    token: TokenData = Depends(get_token_data),
    db: Session = Depends(get_db),
) -> User:
    """FastAPI dependency returning the caller's User row, creating it on first sight."""
    user = db.get(User, token.user_id)
    if user is None:
        user = User(
            id=token.user_id,
            email=token.email,
            name=token.name,
            liked_ingredients=[],
            disliked_ingredients=[],
        )
        db.add(user)
        db.commit()
        logger.info(f"Created user {token.user_id}")
    return user
