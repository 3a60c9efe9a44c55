"""Short link models."""

from datetime import datetime

from pydantic import BaseModel, Field

from shortlink.core.db import MongoModel
from shortlink.utils import now

ANONYMOUS_OWNER_ID = -1  # owner_user_id of links created without a session


class Link(MongoModel):
    """Short link. ``id`` is the random numeric code.

    ``shortcode`` always equals the encoding of ``id`` in the configured universe.
    Indexed on owner_user_id.
    """

    shortcode: str
    url: str  # Destination
    owner_user_id: int = ANONYMOUS_OWNER_ID
    clicks: int = 0
    created_at: datetime = Field(default_factory=now)

    @property
    def is_anonymous(self) -> bool:
        return self.owner_user_id == ANONYMOUS_OWNER_ID


class LinkView(BaseModel):
    """Short link (API representation)."""

    shortcode: str = Field(..., description="Short code appended to the service URL")
    url: str = Field(..., description="Destination URL")
    clicks: int = Field(..., description="Number of redirects served")
    created_at: datetime = Field(..., description="Creation time")

    @classmethod
    def from_domain(cls, link: Link) -> "LinkView":
        """Create view model from domain model."""
        return cls(shortcode=link.shortcode, url=link.url, clicks=link.clicks, created_at=link.created_at)
