import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import secrets_match
from app.models.user import User
from app.services.session_service import AuthContext, session_validator
from app.utils.errors import Forbidden, InternalConfigurationError, Unauthenticated

logger = logging.getLogger(__name__)


def get_auth_context(
    request: Request,
    db: Session = Depends(get_db),
) -> AuthContext:
    """Require a valid session token and attach it to `request.state.auth`."""
    auth = session_validator.authenticate(db, request.headers.get("authorization"))
    request.state.auth = auth
    return auth


def get_optional_auth_context(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[AuthContext]:
    """Resolve the caller when a valid token is present, otherwise continue anonymously."""
    auth = session_validator.authenticate_optional(db, request.headers.get("authorization"))
    request.state.auth = auth
    return auth


def get_current_user(auth: AuthContext = Depends(get_auth_context)) -> User:
    return auth.user


def verify_registration_key(request: Request) -> None:
    """
    Registration gate: the register route requires the shared registration
    key as a bearer credential. Fails closed when no key is configured.
    """
    auth_header = request.headers.get("authorization")
    if not auth_header:
        raise Unauthenticated("Registration API key not found. Access denied.")

    scheme, _, api_key = auth_header.partition(" ")
    if scheme != "Bearer":
        raise Unauthenticated("Invalid API key format. Use Bearer token.")

    if not api_key:
        raise Unauthenticated("Registration API key not found. Access denied.")

    expected_key = settings.REGISTRATION_API_KEY
    if not expected_key:
        logger.error("REGISTRATION_API_KEY is not configured; rejecting registration")
        raise InternalConfigurationError("Registration is not configured. Contact the administrator.")

    if not secrets_match(api_key, expected_key):
        raise Forbidden("Invalid registration API key. Access denied.")
