from collections.abc import Mapping
from typing import Any

from shortlink.core.core import Service
from shortlink.core.modules.user.models import User
from shortlink.errors import AccessDeniedError, SessionInvalidReason, SessionValidationError


class AccessService(Service):
    async def ensure_authenticated(self, token_values: Mapping[str, Any]) -> User:
        """Ensure the cookie carries a valid session and return its user."""
        return await self.core.services.session.get_authenticated_user(token_values)

    async def get_optional_user(self, token_values: Mapping[str, Any]) -> User | None:
        """Return the session user, or None for requests without a session cookie.

        A cookie that is present but invalid still fails.
        """
        try:
            return await self.ensure_authenticated(token_values)
        except SessionValidationError as e:
            if e.reason == SessionInvalidReason.ABSENT:
                return None
            raise

    async def ensure_admin(self, token_values: Mapping[str, Any]) -> User:
        """Ensure the authenticated user is admin, raise AccessDeniedError if not."""
        user = await self.ensure_authenticated(token_values)
        if not user.is_admin:
            raise AccessDeniedError("Admin privileges required")
        return user
