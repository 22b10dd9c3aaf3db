import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import UnauthorizedError
from app.core.security import (
    REFRESH_TOKEN,
    create_token_pair,
    decode_token,
    get_password_hash,
    verify_password,
)
from app.models.user import HRUser

logger = logging.getLogger(__name__)


class AuthService:

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[HRUser]:
        return self.db.query(HRUser).filter(HRUser.email == email.strip().lower()).first()

    def login(self, email: str, password: str) -> dict:
        user = self.find_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise UnauthorizedError("Invalid credentials")

        logger.info("HR user %s logged in", user.id)
        return {"user": user, **create_token_pair(user.id, user.email)}

    def refresh(self, refresh_token: str) -> dict:
        payload = decode_token(refresh_token, REFRESH_TOKEN)
        user = None
        if payload is not None:
            user = self.db.query(HRUser).filter(HRUser.id == payload["userId"]).first()
        if not user:
            raise UnauthorizedError("Invalid or expired refresh token")
        return create_token_pair(user.id, user.email)

    def create_user(self, email: str, password: str, name: str) -> HRUser:
        user = HRUser(email=email.strip().lower(), password_hash=get_password_hash(password), name=name)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
