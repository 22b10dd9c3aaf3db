import logging
from datetime import timedelta
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.config import settings
from app.core.database import get_db
from app.core.errors import UnauthorizedError
from app.models.user import HRUser

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        logger.warning("Stored password hash could not be parsed")
        return False


def _secret_for(token_type: str) -> str:
    return settings.REFRESH_SECRET_KEY if token_type == REFRESH_TOKEN else settings.SECRET_KEY


def create_token(user_id: int, email: str, token_type: str = ACCESS_TOKEN) -> str:
    minutes = (
        settings.REFRESH_TOKEN_EXPIRE_MINUTES
        if token_type == REFRESH_TOKEN
        else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {
        "userId": user_id,
        "email": email,
        "type": token_type,
        "exp": utcnow() + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, _secret_for(token_type), algorithm=settings.ALGORITHM)


def create_token_pair(user_id: int, email: str) -> dict:
    return {
        "accessToken": create_token(user_id, email, ACCESS_TOKEN),
        "refreshToken": create_token(user_id, email, REFRESH_TOKEN),
    }


def decode_token(token: str, token_type: str = ACCESS_TOKEN) -> Optional[dict]:
    """Return the payload, or None when the token is invalid, expired or of the wrong type."""
    try:
        payload = jwt.decode(token, _secret_for(token_type), algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != token_type or not isinstance(payload.get("userId"), int):
        return None
    return payload


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> HRUser:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No token provided")

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")

    user = db.query(HRUser).filter(HRUser.id == payload["userId"]).first()
    if not user:
        raise UnauthorizedError("Invalid or expired token")
    return user
