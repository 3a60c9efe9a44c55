import secrets
from collections.abc import Mapping
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from shortlink import utils
from shortlink.core.core import Service
from shortlink.core.modules.session.models import Session, SessionToken
from shortlink.core.modules.session.store import SessionStore
from shortlink.core.modules.user.models import User
from shortlink.errors import ConflictError, NotFoundError, SessionInvalidReason, SessionValidationError

logger = structlog.get_logger(__name__)

SESSION_ID_BITS = 63  # Fits a signed BSON int64
MAX_MINT_ATTEMPTS = 3


def mint_session_id() -> int:
    """Random session id from the OS CSPRNG, independent of link ids."""
    return secrets.randbits(SESSION_ID_BITS)


class SessionService(Service):
    """Issues, validates and invalidates user sessions.

    A session is split between the outward token in the client cookie and
    the authoritative record in the store; every check goes to the store.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self.store = SessionStore(database.get_collection("sessions"))

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self.store.create_indexes()

    async def issue_session(self, user: User) -> SessionToken:
        """Create and persist a session for the user, return the fields for the cookie."""
        expiry_instant = utils.now_unix() + self.core.config.session_max_age_seconds
        for attempt in range(1, MAX_MINT_ATTEMPTS + 1):
            session = Session(id=mint_session_id(), expiry_instant=expiry_instant, user_id=user.id)
            try:
                await self.store.create(session)
            except ConflictError:
                logger.warning("session_id_collision", attempt=attempt)
                continue
            logger.info("session_issued", user_id=user.id, expiry_instant=expiry_instant)
            return SessionToken.from_session(session)
        raise ConflictError("Could not create a session, please try again")

    async def validate(self, values: Mapping[str, Any]) -> Session:
        """Validate cookie values against the stored record.

        Raises:
            SessionValidationError: with the reason the token was rejected
        """
        try:
            return await self._validate(values)
        except SessionValidationError as e:
            logger.info("session_validation_failed", reason=e.reason)
            raise

    async def _validate(self, values: Mapping[str, Any]) -> Session:
        token = SessionToken.from_cookie(values)

        try:
            session = await self.store.fetch_by_id(token.session_id)
        except NotFoundError:
            raise SessionValidationError(SessionInvalidReason.NOT_FOUND) from None

        if not token.matches(session):
            raise SessionValidationError(SessionInvalidReason.MISMATCHED)

        # Expired records stay in the store until the TTL monitor removes them
        if session.is_expired(utils.now_unix()):
            raise SessionValidationError(SessionInvalidReason.EXPIRED)

        return session

    async def get_authenticated_user(self, values: Mapping[str, Any]) -> User:
        session = await self.validate(values)
        try:
            return await self.core.services.user.get_user(session.user_id)
        except NotFoundError:
            logger.info("session_validation_failed", reason=SessionInvalidReason.NOT_FOUND, user_id=session.user_id)
            raise SessionValidationError(SessionInvalidReason.NOT_FOUND) from None

    async def is_session_valid(self, values: Mapping[str, Any]) -> bool:
        try:
            await self.validate(values)
        except SessionValidationError:
            return False
        return True

    async def invalidate_session(self, values: Mapping[str, Any]) -> None:
        """Delete the stored record the cookie points at, if the cookie matches it.

        Unparseable or unknown tokens are ignored so logout always succeeds.
        """
        try:
            token = SessionToken.from_cookie(values)
            session = await self.store.fetch_by_id(token.session_id)
        except (SessionValidationError, NotFoundError):
            return
        if token.matches(session):
            await self.store.delete(session.id)
            logger.info("session_invalidated", user_id=session.user_id)
