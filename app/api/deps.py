# app/api/deps.py
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.data.models.user import UserModel
from app.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


#klienci zewnetrzni sa budowani w create_app i trzymani w app.state
def get_payment_gateway(request: Request):
    return request.app.state.payment_gateway


def get_lock_service(request: Request):
    return request.app.state.lock_service


def get_identity_provider(request: Request):
    return request.app.state.identity_provider


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> UserModel:
    """Rozwiazuje usera z bearer tokena zanim ruszy logika endpointu, inaczej 401."""
    token = credentials.credentials if credentials else None
    return AuthService(db, identity_provider=None).resolve_user(token)
