"""User identity and mock authentication schemas."""

from sqlmodel import Field, SQLModel

EMAIL_DOMAIN = "example.com"


class User(SQLModel):
    """Logged-in user identity (no credentials are stored)."""

    username: str = Field(min_length=1, max_length=100)
    email: str = Field(max_length=255)

    @classmethod
    def for_username(cls, username: str) -> "User":
        """Build the identity the mock login assigns to a username."""
        return cls(username=username, email=f"{username.lower()}@{EMAIL_DOMAIN}")


class UserLogin(SQLModel):
    """Schema for login. Both fields must be non-empty."""

    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=128)


class UserRegister(SQLModel):
    """Schema for registration."""

    username: str = Field(default="", max_length=100)
    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=128)


class RecoveryRequest(SQLModel):
    """Schema for password recovery."""

    email: str = Field(default="", max_length=255)


class AuthResponse(SQLModel):
    """Schema for authentication response."""

    user: User


class MessageResponse(SQLModel):
    """Plain message response."""

    message: str
