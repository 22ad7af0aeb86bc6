"""Password hashing, action tokens and signed session tokens."""

import logging
import secrets
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from bienes_raices.config import get_settings
from bienes_raices.schemas.auth import SessionClaims

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)

# 32 random bytes, 43 url-safe characters
OPAQUE_ID_BYTES = 32


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against its hash.

    A stored hash passlib cannot identify or parse counts as a mismatch.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.warning(f"Unusable password hash on record: {e}")
        return False


def generate_opaque_id() -> str:
    """Unguessable single-use token for confirmation and reset links."""
    return secrets.token_urlsafe(OPAQUE_ID_BYTES)


def create_session_token(
    account_id: int, name: str, expires_delta: timedelta | None = None
) -> str:
    """Create the signed JWT stored in the session cookie."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expiration_minutes)
    expire = datetime.now(UTC) + expires_delta
    to_encode = {
        "sub": str(account_id),
        "name": name,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str | None) -> SessionClaims | None:
    """Check signature and expiry; None for anything that does not verify."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        return None
    return SessionClaims(account_id=int(subject), name=payload.get("name") or "")
