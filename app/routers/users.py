"""User profile endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.dependencies.auth import get_optional_auth_context
from app.models.user import User
from app.schemas.common import SuccessResponse
from app.schemas.user import PublicUserProfile, UserProfile
from app.services.session_service import AuthContext
from app.utils.errors import UserNotFoundError

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{username}", response_model=SuccessResponse)
def get_user(
    username: str,
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: Session = Depends(get_db),
):
    """Public profile. The owner also sees email and preferences."""
    user = db.query(User).filter(User.username == username, User.is_active == True).first()  # noqa: E712
    if not user:
        raise UserNotFoundError()

    is_own_profile = auth is not None and auth.user.id == user.id
    schema = UserProfile if is_own_profile else PublicUserProfile
    return SuccessResponse(
        message="User retrieved successfully",
        data={
            "user": schema.model_validate(user).model_dump(by_alias=True),
            "isOwnProfile": is_own_profile,
        },
    )
