from enum import StrEnum

from pydantic import BaseModel, Field

from shortlink.core.db import MongoModel


class Permissions(StrEnum):
    """Access level of a user."""

    USER = "user"
    ADMIN = "admin"


class User(MongoModel):
    """User domain model with credentials.

    Indexed on email - unique. ``id`` comes from the user counter.
    """

    email: str  # Login key
    username: str  # Local part of the email, not unique
    password_hash: str  # bcrypt hash
    permissions: Permissions = Permissions.USER

    @property
    def is_admin(self) -> bool:
        return self.permissions == Permissions.ADMIN


class UserView(BaseModel):
    """User account information (API representation)."""

    id: int = Field(..., description="User ID")
    email: str = Field(..., description="Email address used to log in")
    username: str = Field(..., description="Username")
    permissions: Permissions = Field(..., description="Access level")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, email=user.email, username=user.username, permissions=user.permissions)


class ProfileView(UserView):
    """Current user with totals over the links they own."""

    link_count: int = Field(..., description="Number of links owned by the user")
    total_clicks: int = Field(..., description="Sum of clicks over all owned links")
