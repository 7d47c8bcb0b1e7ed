from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_identity_provider
from app.data.database import get_db
from app.domain.schemas import ApiResponse, AuthOut, LoginIn, SignupIn
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=ApiResponse[AuthOut])
def signup(
    payload: SignupIn,
    db: Session = Depends(get_db),
    identity=Depends(get_identity_provider),
):
    user = AuthService(db, identity).signup(payload)
    return ApiResponse(data=user, message="User registered successfully")


@router.post("/login", response_model=ApiResponse[AuthOut])
def login(
    payload: LoginIn,
    db: Session = Depends(get_db),
    identity=Depends(get_identity_provider),
):
    user = AuthService(db, identity).login(payload)
    return ApiResponse(data=user, message="Login successful")
