from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from shortlink.core.core import Service
from shortlink.core.modules.counter.models import CounterType
from shortlink.core.modules.user.models import Permissions, User
from shortlink.core.modules.user.passwords import hash_password, verify_password
from shortlink.core.modules.user.validators import username_from_email, validate_email, validate_password
from shortlink.errors import AuthenticationError, ConflictError, NotFoundError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Manages user accounts stored in the ``users`` collection."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        """Initialize indexes and admin user."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self.ensure_admin_user_exists()

    async def get_user(self, user_id: int) -> User:
        """Get user by ID."""
        doc = await self._collection.find_one({"_id": user_id})
        if doc is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return User.model_validate(doc)

    async def get_user_by_email(self, email: str) -> User:
        """Get user by email (case-insensitive)."""
        doc = await self._collection.find_one({"email": email.strip().lower()})
        if doc is None:
            raise NotFoundError(f"User '{email}' not found")
        return User.model_validate(doc)

    async def has_email(self, email: str) -> bool:
        return await self._collection.find_one({"email": email.strip().lower()}) is not None

    async def create_user(self, email: str, password: str, permissions: Permissions = Permissions.USER) -> User:
        """Create user with hashed password. The username is derived from the email."""
        email = validate_email(email)
        if await self.has_email(email):
            raise ConflictError("User already exists")

        validate_password(password)
        user_id = await self.core.services.counter.get_next_sequence(CounterType.USER)
        user = User(
            id=user_id,
            email=email,
            username=username_from_email(email),
            password_hash=hash_password(password),
            permissions=permissions,
        )
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError("User already exists") from e

        logger.info("user_created", user_id=user.id, permissions=user.permissions)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user if the password matches.

        Unknown emails and wrong passwords fail with the same message.
        """
        try:
            user = await self.get_user_by_email(email)
        except NotFoundError:
            logger.info("login_failed", reason="unknown_email")
            raise AuthenticationError("Invalid email or password") from None

        try:
            verify_password(user.password_hash, password)
        except AuthenticationError:
            logger.info("login_failed", reason="wrong_password", user_id=user.id)
            raise
        return user

    async def delete_user(self, user_id: int) -> None:
        """Delete a user and every session they own."""
        result = await self._collection.delete_one({"_id": user_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"User '{user_id}' not found")
        await self.core.services.session.store.delete_by_user(user_id)

    async def ensure_admin_user_exists(self) -> None:
        """Create the configured admin user if not exists."""
        config = self.core.config
        if not config.admin_email or not config.admin_password:
            return
        if not await self.has_email(config.admin_email):
            await self.create_user(config.admin_email, config.admin_password, Permissions.ADMIN)
