# app/services/auth_service.py
from sqlalchemy.orm import Session

from app.data.models.user import UserModel
from app.domain.errors import Conflict, Unauthorized
from app.domain.schemas import AuthOut, LoginIn, SignupIn
from app.repos.user_repo import UserRepo
from app.utils.security import create_access_token, decode_access_token
from app.utils.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    def __init__(self, db: Session, identity_provider):
        self.repo = UserRepo(db)
        self.identity = identity_provider

    def _auth_out(self, user: UserModel) -> AuthOut:
        token = create_access_token(
            user_id=user.id,
            auth_id=user.auth_id,
            email=user.email,
            username=user.username,
        )
        return AuthOut(
            id=user.id,
            email=user.email,
            username=user.username,
            phone=user.phone,
            address=user.address,
            access_token=token,
        )

    def signup(self, payload: SignupIn) -> AuthOut:
        email = payload.email.lower()
        if self.repo.get_by_email(email):
            raise Conflict("User already exists")

        auth_id = self.identity.create_user(email, payload.password)

        user = self.repo.create_user(
            UserModel(
                auth_id=auth_id,
                email=email,
                username=payload.username,
                phone=payload.phone,
                address=payload.address,
            )
        )
        logger.info(f"User {user.id} registered ({email})")
        return self._auth_out(user)

    def login(self, payload: LoginIn) -> AuthOut:
        email = payload.email.lower()
        auth_id = self.identity.authenticate(email, payload.password)
        if not auth_id:
            logger.info(f"Failed login for {email}")
            raise Unauthorized("Invalid credentials")

        user = self.repo.get_by_auth_id(auth_id)
        if not user:
            logger.warning(f"Identity {auth_id} has no local user record")
            raise Unauthorized("Invalid credentials")

        logger.info(f"User {user.id} logged in")
        return self._auth_out(user)

    def resolve_user(self, token: str | None) -> UserModel:
        """Bearer token -> user z bazy albo Unauthorized."""
        if not token:
            raise Unauthorized()

        claims = decode_access_token(token)
        if not claims or "userId" not in claims:
            raise Unauthorized()

        user = self.repo.get_user(claims["userId"])
        if not user or user.auth_id != claims.get("authId"):
            raise Unauthorized()
        return user
