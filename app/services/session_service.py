"""Request authentication against the token store.

Credentials are resolved through a fixed chain of verifiers:

1. ``OpaqueTokenVerifier`` - the store-backed opaque token issued at login.
2. ``SignedTokenVerifier`` - the self-contained JWT handed out next to it for
   older clients. Its claims only point at a stored session row; the row is
   authoritative for expiry, last use and whether the session still exists.

Whichever verifier resolves the credential, the remaining checks (owner
exists, not expired, owner active) run against the stored row.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import CredentialType, TOKENABLE_USER
from app.core.security import decode_signed_token
from app.models.personal_access_token import PersonalAccessToken
from app.models.user import User
from app.services.token_service import TokenService
from app.utils.errors import APIError, AccountDeactivatedError, Unauthenticated
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

MSG_TOKEN_MISSING = "Token not found. Access denied."
MSG_TOKEN_FORMAT = "Invalid token format. Use Bearer token."
MSG_TOKEN_INVALID = "Invalid token."
MSG_TOKEN_EXPIRED = "Token has expired."
MSG_USER_MISSING = "User not found."
MSG_DEACTIVATED = "Account has been deactivated. Please contact an administrator."


@dataclass
class AuthContext:
    """Identity attached to an authenticated request."""
    user: User
    token: str
    token_record: PersonalAccessToken
    credential_type: CredentialType


def parse_bearer(authorization: Optional[str]) -> str:
    """Extract the credential from an ``Authorization: Bearer <credential>`` header."""
    if not authorization:
        raise Unauthenticated(MSG_TOKEN_MISSING)

    scheme, _, credential = authorization.partition(" ")
    if scheme.lower() != "bearer":
        raise Unauthenticated(MSG_TOKEN_FORMAT)

    credential = credential.strip()
    if not credential:
        raise Unauthenticated(MSG_TOKEN_MISSING)
    return credential


class CredentialVerifier:
    credential_type: CredentialType

    def resolve(self, db: Session, credential: str) -> Optional[PersonalAccessToken]:
        raise NotImplementedError


class OpaqueTokenVerifier(CredentialVerifier):
    credential_type = CredentialType.OPAQUE

    def resolve(self, db, credential):
        return TokenService.find_by_token(db, credential)


class SignedTokenVerifier(CredentialVerifier):
    credential_type = CredentialType.SIGNED

    def resolve(self, db, credential):
        # Opaque tokens are plain hex and never contain the JWT separators
        if credential.count(".") != 2:
            return None
        claims = decode_signed_token(credential)
        if not claims:
            return None
        try:
            session_id = int(claims["sid"])
        except (TypeError, ValueError):
            return None

        record = TokenService.get_by_id(db, session_id)
        if (
            record is None
            or record.tokenable_type != TOKENABLE_USER
            or str(record.tokenable_id) != str(claims["sub"])
        ):
            return None
        return record


class SessionValidator:
    """Resolves bearer credentials to an `AuthContext`."""

    def __init__(self, verifiers: Optional[List[CredentialVerifier]] = None):
        self._verifiers = verifiers

    @property
    def verifiers(self) -> List[CredentialVerifier]:
        if self._verifiers is not None:
            return self._verifiers
        chain: List[CredentialVerifier] = [OpaqueTokenVerifier()]
        if settings.signed_tokens_enabled:
            chain.append(SignedTokenVerifier())
        return chain

    def _resolve(self, db: Session, credential: str) -> Tuple[PersonalAccessToken, CredentialType]:
        for verifier in self.verifiers:
            record = verifier.resolve(db, credential)
            if record is not None:
                return record, verifier.credential_type
        raise Unauthenticated(MSG_TOKEN_INVALID)

    def authenticate(
        self,
        db: Session,
        authorization: Optional[str],
        now: Optional[datetime] = None,
    ) -> AuthContext:
        """
        Strict mode. Raises `Unauthenticated` (401) or `AccountDeactivatedError`
        (403); store errors propagate unchanged.
        """
        now = now or utcnow()
        credential = parse_bearer(authorization)
        record, credential_type = self._resolve(db, credential)

        user = db.query(User).filter(User.id == record.tokenable_id).first()
        if not user:
            raise Unauthenticated(MSG_USER_MISSING)

        # Lazy expiry: the row stays until logout or a later cleanup
        if record.is_expired(now):
            raise Unauthenticated(MSG_TOKEN_EXPIRED)

        TokenService.touch(db, record, now)

        if not user.is_active:
            logger.info("Rejected request from deactivated user %s", user.id)
            raise AccountDeactivatedError(MSG_DEACTIVATED)

        return AuthContext(
            user=user,
            token=credential,
            token_record=record,
            credential_type=credential_type,
        )

    def authenticate_optional(
        self,
        db: Session,
        authorization: Optional[str],
        now: Optional[datetime] = None,
    ) -> Optional[AuthContext]:
        """Soft mode: same checks, but any failure means an anonymous caller."""
        if not authorization:
            return None
        try:
            return self.authenticate(db, authorization, now)
        except APIError:
            return None
        except SQLAlchemyError:
            db.rollback()
            logger.warning("Store error during optional authentication", exc_info=True)
            return None


session_validator = SessionValidator()
