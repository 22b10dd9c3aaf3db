from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core import responses
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import HRUser
from app.schemas.user import HRUserOut, LoginRequest, RefreshRequest
from app.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email + password for an access/refresh token pair."""
    result = AuthService(db).login(body.email, body.password)
    result["user"] = HRUserOut.model_validate(result["user"])
    return responses.success("Login successful", result)


@router.post("/refresh")
def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    tokens = AuthService(db).refresh(body.refreshToken)
    return responses.success("Token refreshed successfully", tokens)


@router.get("/me")
def me(current_user: HRUser = Depends(get_current_user)):
    return responses.success("Current user retrieved successfully", HRUserOut.model_validate(current_user))
