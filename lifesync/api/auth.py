"""Mock authentication API endpoints."""

from fastapi import APIRouter, status

from lifesync.api.deps import CurrentUser, PrefsStore, to_http_error
from lifesync.models.user import (
    AuthResponse,
    MessageResponse,
    RecoveryRequest,
    UserLogin,
    UserRegister,
)
from lifesync.services import auth as auth_service
from lifesync.services.errors import LifeSyncError

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(prefs: PrefsStore, user_data: UserRegister) -> AuthResponse:
    """Register and sign in. No account is actually created."""
    try:
        user = auth_service.register_user(prefs, user_data)
    except LifeSyncError as e:
        raise to_http_error(e) from e
    return AuthResponse(user=user)


@router.post("/login", response_model=AuthResponse)
def login_user(prefs: PrefsStore, credentials: UserLogin) -> AuthResponse:
    """Sign in with any non-empty email and password."""
    try:
        user = auth_service.login_user(prefs, credentials)
    except LifeSyncError as e:
        raise to_http_error(e) from e
    return AuthResponse(user=user)


@router.post("/recover", response_model=MessageResponse)
def recover_password(data: RecoveryRequest) -> MessageResponse:
    """Pretend to send a password recovery link."""
    try:
        message = auth_service.recover_password(data)
    except LifeSyncError as e:
        raise to_http_error(e) from e
    return MessageResponse(message=message)


@router.post("/logout", response_model=MessageResponse)
def logout_user(prefs: PrefsStore) -> MessageResponse:
    """Sign out by clearing the persisted session user."""
    auth_service.logout_user(prefs)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=AuthResponse)
def current_user_endpoint(current_user: CurrentUser) -> AuthResponse:
    """Return the logged-in user."""
    return AuthResponse(user=current_user)
