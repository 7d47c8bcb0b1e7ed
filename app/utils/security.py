# app/utils/security.py
import time

import bcrypt
import jwt

from app.utils.settings import JWT_ALGORITHM, JWT_SECRET, JWT_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

BCRYPT_ROUNDS = 12


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def create_access_token(
    user_id: int,
    auth_id: str,
    email: str,
    username: str | None = None,
    secret: str = JWT_SECRET,
    ttl: int = JWT_TTL_SECONDS,
    now: int | None = None,
) -> str:
    """Token HS256 z claimami usera, wazny 24h (domyslnie)."""
    iat = int(now if now is not None else time.time())
    payload = {
        "userId": user_id,
        "authId": auth_id,
        "email": email,
        "username": username,
        "iat": iat,
        "exp": iat + ttl,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret: str = JWT_SECRET) -> dict | None:
    """Zwraca claimy albo None dla zlego podpisu / wygaslego tokena."""
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.PyJWTError as e:
        logger.warning(f"Token verification failed: {e}")
        return None
