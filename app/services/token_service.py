"""Token store and issuer for opaque session tokens.

The store keeps the SHA-256 digest of each credential; the plain credential
is handed to the caller exactly once, at issuance.
"""
from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import DEFAULT_ABILITIES, TOKENABLE_USER
from app.core.security import generate_token, hash_token
from app.models.personal_access_token import PersonalAccessToken
from app.models.user import User
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


class TokenService:

    @staticmethod
    def session_lifetime() -> timedelta:
        return timedelta(hours=settings.SESSION_LIFETIME_HOURS)

    @staticmethod
    def create_token(
        db: Session,
        user: User,
        name: Optional[str] = None,
        abilities: Iterable[str] = DEFAULT_ABILITIES,
        now: Optional[datetime] = None,
        commit: bool = True,
    ) -> Tuple[str, PersonalAccessToken]:
        """
        Issue a new live token for `user`.
        - Does not check for an existing live token, the caller owns that
        - Fixed expiry: issuance time + session lifetime
        Returns (plain_token, record).
        """
        now = now or utcnow()
        plain_token = generate_token()

        record = PersonalAccessToken(
            tokenable_type=TOKENABLE_USER,
            tokenable_id=user.id,
            name=name or settings.TOKEN_NAME,
            token=hash_token(plain_token),
            abilities=",".join(abilities),
            created_at=now,
            updated_at=now,
            last_used_at=now,
            expires_at=now + TokenService.session_lifetime(),
        )
        db.add(record)
        if commit:
            db.commit()
            db.refresh(record)
        else:
            db.flush()

        return plain_token, record

    @staticmethod
    def find_by_token(db: Session, plain_token: str) -> Optional[PersonalAccessToken]:
        if not plain_token:
            return None
        return (
            db.query(PersonalAccessToken)
            .filter(PersonalAccessToken.token == hash_token(plain_token))
            .first()
        )

    @staticmethod
    def get_by_id(db: Session, token_id: int) -> Optional[PersonalAccessToken]:
        return db.query(PersonalAccessToken).filter(PersonalAccessToken.id == token_id).first()

    @staticmethod
    def find_active_session(
        db: Session,
        user_id: int,
        now: Optional[datetime] = None,
    ) -> Optional[PersonalAccessToken]:
        """Return the user's live token, if any (expiry unset counts as live)."""
        now = now or utcnow()
        return (
            db.query(PersonalAccessToken)
            .filter(
                PersonalAccessToken.tokenable_type == TOKENABLE_USER,
                PersonalAccessToken.tokenable_id == user_id,
                (PersonalAccessToken.expires_at.is_(None)) | (PersonalAccessToken.expires_at > now),
            )
            .order_by(PersonalAccessToken.created_at.desc())
            .first()
        )

    @staticmethod
    def touch(db: Session, record: PersonalAccessToken, now: Optional[datetime] = None) -> bool:
        """Stamp last_used_at. Best effort: a failed write never fails the request."""
        token_id = record.id
        try:
            record.last_used_at = now or utcnow()
            db.commit()
            return True
        except SQLAlchemyError:
            db.rollback()
            logger.warning("Failed to update last_used_at for token %s", token_id, exc_info=True)
            return False

    @staticmethod
    def delete_token(db: Session, record: PersonalAccessToken) -> int:
        """Hard-delete exactly this token row. Zero affected rows is not an error."""
        deleted = (
            db.query(PersonalAccessToken)
            .filter(PersonalAccessToken.id == record.id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted
