"""
Password hashing and bearer tokens for GetStreetCred.

Passwords are stored as bcrypt hashes (cost from BCRYPT_ROUNDS). Signup and
signin hand out HS256 tokens whose ``sub`` is the user id; api.deps reads
it back to identify the caller.
"""

from datetime import datetime, timedelta
from typing import Optional

from jose import jwt
from passlib.context import CryptContext

from streetcred.core.config import get_settings

ALGORITHM = "HS256"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """bcrypt hash stored in users.password; used at signup and on profile password change."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Check a signin password against the stored hash.

    Rows that do not hold a bcrypt hash (e.g. legacy plaintext passwords)
    never verify.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue the bearer token returned by signup and signin.

    ``sub`` carries the user id only; the role is looked up on every
    request so a role change applies to existing tokens. Lifetime defaults
    to ACCESS_TOKEN_EXPIRE_HOURS.
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.access_token_expire_hours)

    issued_at = datetime.utcnow()
    claims = {"sub": user_id, "iat": issued_at, "exp": issued_at + expires_delta}
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """
    Claims of a token issued by create_access_token.

    Raises:
        JWTError: bad signature, malformed token or past ``exp``;
            api.deps turns this into a 401
    """
    return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
