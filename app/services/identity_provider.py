# app/services/identity_provider.py
import uuid

import requests
from sqlalchemy.orm import Session, sessionmaker

from app.data.models.credential import CredentialModel
from app.domain.errors import Conflict, InternalError
from app.repos.credential_repo import CredentialRepo
from app.utils.retry import http_retry
from app.utils.security import check_password, hash_password
from app.utils.settings import (
    SUPABASE_URL,
    SUPABASE_SERVICE_ROLE_KEY,
    SUPABASE_ANON_KEY,
    IDENTITY_TIMEOUT_SECONDS,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)


class LocalIdentityProvider:
    """Hasla trzymane lokalnie jako hashe bcrypt (dev / testy)."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create_user(self, email: str, password: str) -> str:
        db: Session = self.session_factory()
        try:
            repo = CredentialRepo(db)
            if repo.get_by_email(email):
                raise Conflict("User already exists")

            auth_id = str(uuid.uuid4())
            repo.create(
                CredentialModel(
                    auth_id=auth_id,
                    email=email,
                    password_hash=hash_password(password),
                )
            )
            logger.info(f"Local identity created for {email}")
            return auth_id
        finally:
            db.close()

    def authenticate(self, email: str, password: str) -> str | None:
        db: Session = self.session_factory()
        try:
            credential = CredentialRepo(db).get_by_email(email)
            if not credential or not check_password(password, credential.password_hash):
                return None
            return credential.auth_id
        finally:
            db.close()


class SupabaseIdentityProvider:
    """
    Supabase Auth (GoTrue) po HTTP:
    -admin API do zakladania kont
    -password grant do logowania
    """

    def __init__(
        self,
        base_url: str | None = None,
        service_role_key: str | None = None,
        anon_key: str | None = None,
        timeout: int = IDENTITY_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or SUPABASE_URL).rstrip("/")
        self.service_role_key = service_role_key or SUPABASE_SERVICE_ROLE_KEY
        self.anon_key = anon_key or SUPABASE_ANON_KEY
        self.timeout = timeout

    def _admin_headers(self) -> dict:
        return {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
        }

    # bez retry, POST nie jest idempotentny
    def create_user(self, email: str, password: str) -> str:
        url = f"{self.base_url}/auth/v1/admin/users"
        logger.info(f"SupabaseIdentityProvider POST {url}")

        resp = requests.post(
            url,
            json={"email": email, "password": password, "email_confirm": True},
            headers=self._admin_headers(),
            timeout=self.timeout,
        )
        if resp.status_code == 422 or (resp.status_code >= 400 and "already" in resp.text.lower()):
            raise Conflict("User already exists")
        if resp.status_code >= 400:
            logger.error(f"Supabase create_user failed: {resp.status_code} {resp.text}")
            raise InternalError()

        return resp.json()["id"]

    @http_retry()
    def authenticate(self, email: str, password: str) -> str | None:
        url = f"{self.base_url}/auth/v1/token"
        logger.info(f"SupabaseIdentityProvider POST {url}")

        resp = requests.post(
            url,
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers={"apikey": self.anon_key},
            timeout=self.timeout,
        )
        if resp.status_code in (400, 401):
            return None
        resp.raise_for_status()
        return resp.json()["user"]["id"]
