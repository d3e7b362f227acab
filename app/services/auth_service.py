from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import or_
from datetime import datetime
from typing import Any, Dict, Optional
import logging

from app.core.config import settings
from app.core.constants import default_additional_info
from app.core.security import create_signed_token
from app.models.user import User, casefold_email
from app.services.session_service import AuthContext
from app.services.token_service import TokenService
from app.utils.errors import (
    AccountDeactivatedError, ActiveSessionError, UserAlreadyExistsError, UserNotFoundError,
)
from app.utils.helpers import as_utc, utcnow

logger = logging.getLogger(__name__)

MSG_EMAIL_TAKEN = "Email already registered"
MSG_USERNAME_TAKEN = "Username already taken"


class AuthService:

    @staticmethod
    def register(
        db: Session,
        name: str,
        username: str,
        email: str,
        image_url: Optional[str] = None,
        gender: Optional[str] = None,
        food_type: Optional[str] = None,
        place_value: Optional[str] = None,
    ) -> User:
        """
        Create a user identity.
        - Email (case-folded) and username must both be unused
        - No session token is issued here; the client logs in afterwards
        """
        email = casefold_email(email)

        existing_user = db.query(User).filter(
            or_(User.email == email, User.username == username)
        ).first()

        if existing_user:
            if existing_user.email == email:
                raise UserAlreadyExistsError(MSG_EMAIL_TAKEN)
            raise UserAlreadyExistsError(MSG_USERNAME_TAKEN)

        new_user = User(
            name=name,
            username=username,
            email=email,
            image_url=image_url or settings.DEFAULT_IMAGE_URL,
            additional_info=default_additional_info(
                gender=gender or "",
                food_type=food_type or "",
                place_value=place_value or "",
            ),
        )

        db.add(new_user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            db.rollback()
            taken = db.query(User).filter(User.email == email).first()
            raise UserAlreadyExistsError(MSG_EMAIL_TAKEN if taken else MSG_USERNAME_TAKEN)
        db.refresh(new_user)

        logger.info("Registered user %s", new_user.id)
        return new_user

    @staticmethod
    def login(
        db: Session,
        email: str,
        name: Optional[str] = None,
        image_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        """
        Social login
        - Refresh name/avatar, check the account is active, stamp last login
        - Refuse when a live session already exists (no silent supersede)
        - Otherwise issue a new session token
        """
        now = now or utcnow()

        # Row lock serializes concurrent logins for the same user around the
        # check-then-insert below
        user = (
            db.query(User)
            .filter(User.email == casefold_email(email))
            .with_for_update()
            .first()
        )
        if not user:
            db.rollback()
            raise UserNotFoundError("User not found. Please register first.")

        if name and name != user.name:
            user.name = name
        if image_url and image_url != user.image_url:
            user.image_url = image_url

        if not user.is_active:
            db.commit()
            logger.info("Login refused for deactivated user %s", user.id)
            raise AccountDeactivatedError()

        user.last_login_at = now
        # Writing now opens the write transaction before the check: on SQLite,
        # where FOR UPDATE is ignored, this takes the database write lock instead
        db.flush()

        existing_session = TokenService.find_active_session(db, user.id, now)
        if existing_session:
            db.commit()
            logger.info("Login refused for user %s: session %s still live", user.id, existing_session.id)
            raise ActiveSessionError(
                data={
                    "hasActiveSession": True,
                    "sessionCreatedAt": as_utc(existing_session.created_at),
                },
            )

        token, record = TokenService.create_token(db, user, settings.TOKEN_NAME, now=now, commit=False)
        db.commit()
        db.refresh(record)

        result = {
            "user": user,
            "token": token,
            "token_type": "Bearer",
            "expires_at": record.expires_at,
        }
        if settings.signed_tokens_enabled:
            result["jwt_token"] = create_signed_token(user.id, record.id, record.expires_at)

        logger.info("User %s logged in (session %s)", user.id, record.id)
        return result

    @staticmethod
    def logout(db: Session, auth: AuthContext) -> datetime:
        """Delete the session row used by this request. Idempotent."""
        deleted = TokenService.delete_token(db, auth.token_record)
        logger.info("User %s logged out (rows deleted: %s)", auth.user.id, deleted)
        return utcnow()

    @staticmethod
    def update_profile(
        db: Session,
        user: User,
        name: Optional[str] = None,
        image_url: Optional[str] = None,
        additional_info: Optional[Dict[str, Any]] = None,
    ) -> User:
        """Update basic fields; `additional_info` is merged key by key at the top level."""
        if name is not None:
            user.name = name
        if image_url is not None:
            user.image_url = image_url
        if additional_info:
            user.additional_info = {**(user.additional_info or {}), **additional_info}

        db.commit()
        db.refresh(user)
        return user
