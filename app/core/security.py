from datetime import datetime, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import secrets
import hashlib
import hmac
from app.core.config import settings


def generate_token(num_bytes: Optional[int] = None) -> str:
    """Random opaque credential, hex encoded (64 chars for 32 bytes)."""
    return secrets.token_hex(num_bytes or settings.TOKEN_BYTES)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def secrets_match(provided: str, expected: str) -> bool:
    """Constant-time comparison of two secrets.

    Unequal lengths are rejected up front; the length itself is not secret.
    """
    provided_bytes = provided.encode("utf-8")
    expected_bytes = expected.encode("utf-8")
    if len(provided_bytes) != len(expected_bytes):
        return False
    return hmac.compare_digest(provided_bytes, expected_bytes)


def create_signed_token(user_id: int, session_id: int, expires_at: datetime) -> str:
    """Self-contained signed credential bound to a stored session row.

    `expires_at` is naive UTC, matching the store columns.
    """
    payload = {
        "sub": str(user_id),
        "sid": session_id,
        "type": "access",
        "iat": datetime.now(timezone.utc),
        "exp": expires_at.replace(tzinfo=timezone.utc),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_signed_token(token: str) -> Optional[Dict[str, Any]]:
    if not settings.SECRET_KEY:
        return None
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except JWTError:
        return None
    if payload.get("type") != "access" or not payload.get("sub") or payload.get("sid") is None:
        return None
    return payload
