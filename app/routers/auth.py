from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.schemas.auth import (
    RegisterRequest, LoginRequest, ProfileUpdateRequest, LoginResponseData,
)
from app.schemas.common import SuccessResponse
from app.schemas.user import UserProfile
from app.services.auth_service import AuthService
from app.services.session_service import AuthContext
from app.dependencies.auth import get_auth_context, verify_registration_key
from app.utils.helpers import as_utc, get_client_ip
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _profile(user) -> dict:
    return UserProfile.model_validate(user).model_dump(by_alias=True)


@router.post(
    "/register",
    response_model=SuccessResponse,
    status_code=201,
    dependencies=[Depends(verify_registration_key)],
)
def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
):
    """
    Register a new user (social sign-up)
    - Requires the registration API key as bearer credential
    - Email and username must be unused
    - No session token is issued; log in afterwards
    """
    user = AuthService.register(
        db=db,
        name=request.name,
        username=request.username,
        email=request.email,
        image_url=request.image_url,
        gender=request.gender,
        food_type=request.food_type,
        place_value=request.place_value,
    )
    return SuccessResponse(message="User registered successfully", data={"user": _profile(user)})


@router.post("/login", response_model=SuccessResponse, status_code=200)
def login(
    request: LoginRequest,
    http_request: Request,
    db: Session = Depends(get_db),
):
    """
    Social login
    - Refreshes name/avatar when provided
    - 409 with the existing session's creation time if one is still live
    - Returns the opaque session token
    """
    logger.debug("Login attempt from %s", get_client_ip(http_request))
    result = AuthService.login(
        db=db,
        email=request.email,
        name=request.name,
        image_url=request.image_url,
    )
    data = LoginResponseData(
        user=UserProfile.model_validate(result["user"]),
        token=result["token"],
        token_type=result["token_type"],
        expires_at=result["expires_at"],
        jwt_token=result.get("jwt_token"),
    )
    return SuccessResponse(
        message="Login successful",
        data=data.model_dump(by_alias=True, exclude_none=True),
    )


@router.post("/logout", response_model=SuccessResponse, status_code=200)
def logout(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Logout user (delete the current session token)"""
    logged_out_at = AuthService.logout(db, auth)
    return SuccessResponse(message="Logout successful", data={"loggedOutAt": as_utc(logged_out_at)})


@router.get("/status", response_model=SuccessResponse)
def auth_status(auth: AuthContext = Depends(get_auth_context)):
    """Check that the presented token is valid"""
    return SuccessResponse(message="Token valid", data={"user": _profile(auth.user)})


@router.get("/profile", response_model=SuccessResponse)
def get_profile(auth: AuthContext = Depends(get_auth_context)):
    return SuccessResponse(message="Profile retrieved successfully", data={"user": _profile(auth.user)})


@router.put("/profile", response_model=SuccessResponse)
def update_profile(
    request: ProfileUpdateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Update name, avatar and merge `additionalInfo` sections"""
    user = AuthService.update_profile(
        db=db,
        user=auth.user,
        name=request.name,
        image_url=request.image_url,
        additional_info=request.additional_info,
    )
    return SuccessResponse(message="Profile updated successfully", data={"user": _profile(user)})
