"""Session management models."""

from collections.abc import Mapping
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from shortlink.core.db import MongoModel
from shortlink.errors import SessionInvalidReason, SessionValidationError

# Cookie keys of the outward session token
SESSION_ID_KEY = "sessId"
EXPIRY_KEY = "expiryTimeUnix"
USER_ID_KEY = "userId"


class Session(MongoModel):
    """Authoritative server-side record of one browser session.

    ``id`` is the random session id, not a database sequence.
    Indexed on user_id, and expires_at (TTL) for background cleanup.
    """

    expiry_instant: int  # Unix seconds after which the session is invalid
    user_id: int

    @property
    def session_id(self) -> int:
        return self.id

    def is_expired(self, at: int) -> bool:
        return at >= self.expiry_instant


class SessionToken(BaseModel):
    """Outward session token carried in the client cookie.

    Never trusted on its own; it is only a lookup key plus the values
    the stored record must match.
    """

    session_id: int = Field(alias=SESSION_ID_KEY)
    expiry_instant: int = Field(alias=EXPIRY_KEY)
    user_id: int = Field(alias=USER_ID_KEY)

    model_config = ConfigDict(strict=True, populate_by_name=True, frozen=True)

    @classmethod
    def from_session(cls, session: Session) -> "SessionToken":
        return cls(session_id=session.id, expiry_instant=session.expiry_instant, user_id=session.user_id)

    @classmethod
    def from_cookie(cls, values: Mapping[str, Any]) -> "SessionToken":
        """Parse cookie values into a typed token.

        Raises:
            SessionValidationError: ``absent`` if any key is missing, ``malformed`` if a value is not an integer
        """
        if any(values.get(key) is None for key in (SESSION_ID_KEY, EXPIRY_KEY, USER_ID_KEY)):
            raise SessionValidationError(SessionInvalidReason.ABSENT)
        try:
            return cls.model_validate(
                {SESSION_ID_KEY: values[SESSION_ID_KEY], EXPIRY_KEY: values[EXPIRY_KEY], USER_ID_KEY: values[USER_ID_KEY]}
            )
        except pydantic.ValidationError as e:
            raise SessionValidationError(SessionInvalidReason.MALFORMED) from e

    def to_cookie(self) -> dict[str, int]:
        return self.model_dump(by_alias=True)

    def matches(self, session: Session) -> bool:
        """Field-by-field comparison against the stored record."""
        return (
            self.session_id == session.id
            and self.expiry_instant == session.expiry_instant
            and self.user_id == session.user_id
        )
