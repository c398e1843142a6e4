"""Mock authentication.

No credentials are checked or stored: a login only requires the fields to be
filled in, and the resulting identity is persisted as the session user.
"""

from lifesync.models.user import RecoveryRequest, User, UserLogin, UserRegister
from lifesync.services.errors import InputValidationError
from lifesync.services.preferences import PreferencesStore

MISSING_FIELDS = "Please fill in all required fields."
MISSING_USERNAME = "Please choose a username."
MISSING_EMAIL = "Please enter your email address."


def login_user(prefs: PreferencesStore, credentials: UserLogin) -> User:
    """Sign in; the username is the local part of the email address."""
    if not credentials.email.strip() or not credentials.password:
        raise InputValidationError(MISSING_FIELDS)

    username = credentials.email.strip().split("@")[0]
    if not username:
        raise InputValidationError(MISSING_FIELDS)

    user = User.for_username(username)
    prefs.set_user(user)
    return user


def register_user(prefs: PreferencesStore, data: UserRegister) -> User:
    """Register and sign in with the chosen username."""
    if not data.email.strip() or not data.password:
        raise InputValidationError(MISSING_FIELDS)
    if not data.username.strip():
        raise InputValidationError(MISSING_USERNAME)

    user = User.for_username(data.username.strip())
    prefs.set_user(user)
    return user


def recover_password(data: RecoveryRequest) -> str:
    """Pretend to send a recovery link."""
    if not data.email.strip():
        raise InputValidationError(MISSING_EMAIL)
    return f"Recovery link sent to {data.email.strip()}"


def logout_user(prefs: PreferencesStore) -> None:
    prefs.clear_user()
