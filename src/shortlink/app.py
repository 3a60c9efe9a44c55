from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from typing import Any

from shortlink.config import Config
from shortlink.core.core import Core
from shortlink.core.modules.link.models import ANONYMOUS_OWNER_ID, LinkView
from shortlink.core.modules.session.models import SessionToken
from shortlink.core.modules.user.models import ProfileView, UserView
from shortlink.errors import ValidationError

# Cookie values of the outward session token, as read from the signed session cookie
TokenValues = Mapping[str, Any]


class App:
    """Facade for all application operations, validates sessions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def is_session_valid(self, token_values: TokenValues) -> bool:
        """Check if the session cookie values are valid."""
        return await self._core.services.session.is_session_valid(token_values)

    async def register(self, email: str, password: str) -> UserView:
        """Create a regular user account."""
        user = await self._core.services.user.create_user(email, password)
        return UserView.from_domain(user)

    async def login(self, token_values: TokenValues, email: str, password: str) -> SessionToken:
        """Authenticate user and create session."""
        if await self.is_session_valid(token_values):
            raise ValidationError("User already logged in")
        user = await self._core.services.user.authenticate(email, password)
        return await self._core.services.session.issue_session(user)

    async def logout(self, token_values: TokenValues) -> None:
        """Invalidate the stored session record."""
        await self._core.services.session.invalidate_session(token_values)

    async def get_current_user(self, token_values: TokenValues) -> ProfileView:
        """Profile of the session user with totals over their links."""
        user = await self._core.services.access.ensure_authenticated(token_values)
        links = await self._core.services.link.list_links_by_owner(user.id)
        return ProfileView(
            **UserView.from_domain(user).model_dump(),
            link_count=len(links),
            total_clicks=sum(link.clicks for link in links),
        )

    async def delete_user(self, token_values: TokenValues, user_id: int) -> None:
        """Delete a user (admin only, cannot delete self)."""
        current_user = await self._core.services.access.ensure_admin(token_values)
        if user_id == current_user.id:
            raise ValidationError("Cannot delete yourself")
        await self._core.services.user.delete_user(user_id)

    async def create_link(self, token_values: TokenValues, url: str) -> LinkView:
        """Shorten a URL. Links created without a session are anonymous."""
        user = await self._core.services.access.get_optional_user(token_values)
        owner_user_id = user.id if user is not None else ANONYMOUS_OWNER_ID
        link = await self._core.services.link.create_link(url, owner_user_id)
        return LinkView.from_domain(link)

    async def get_my_links(self, token_values: TokenValues) -> list[LinkView]:
        user = await self._core.services.access.ensure_authenticated(token_values)
        links = await self._core.services.link.list_links_by_owner(user.id)
        return [LinkView.from_domain(link) for link in links]

    async def delete_link(self, token_values: TokenValues, shortcode: str) -> None:
        """Delete a link (owner or admin)."""
        user = await self._core.services.access.ensure_authenticated(token_values)
        await self._core.services.link.delete_link(shortcode, user)

    async def resolve_shortcode(self, shortcode: str) -> str:
        """Destination URL for a redirect. Public."""
        return await self._core.services.link.resolve(shortcode)
