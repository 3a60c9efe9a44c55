from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from shortlink.core.core import Service
from shortlink.core.modules.link.codec import decode, encode
from shortlink.core.modules.link.idgen import generate_unique
from shortlink.core.modules.link.models import ANONYMOUS_OWNER_ID, Link
from shortlink.core.modules.link.validators import normalize_url
from shortlink.core.modules.user.models import User
from shortlink.errors import AccessDeniedError, ConflictError, MalformedError, NotFoundError

logger = structlog.get_logger(__name__)

MAX_INSERT_ATTEMPTS = 3

# Single-segment paths served by other routes; a link with one of these codes could not be followed
RESERVED_SHORTCODES = frozenset({"docs", "redoc", "health"})


class LinkService(Service):
    """Creates, resolves and deletes short links in the ``links`` collection."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("links")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("owner_user_id", 1)])

    @property
    def universe(self) -> str:
        return self.core.config.shortcode_universe

    async def link_exists(self, link_id: int) -> bool:
        return await self._collection.find_one({"_id": link_id}, projection={"_id": 1}) is not None

    async def get_link(self, link_id: int) -> Link:
        doc = await self._collection.find_one({"_id": link_id})
        if doc is None:
            raise NotFoundError("Link not found")
        return Link.model_validate(doc)

    async def is_id_taken(self, link_id: int) -> bool:
        """Whether a new link may not use this id: stored already, or its code is a fixed route."""
        return encode(link_id, self.universe) in RESERVED_SHORTCODES or await self.link_exists(link_id)

    async def get_link_by_shortcode(self, shortcode: str) -> Link:
        """Look up a link by its canonical code.

        Codes longer than the configured length or with leading zero digits
        name no link, even when they decode to a stored id.
        """
        if len(shortcode) > self.core.config.shortcode_length:
            raise NotFoundError("Link not found")
        try:
            link_id = decode(shortcode, self.universe)
        except MalformedError:
            raise NotFoundError("Link not found") from None
        if encode(link_id, self.universe) != shortcode:
            raise NotFoundError("Link not found")
        return await self.get_link(link_id)

    async def create_link(self, url: str, owner_user_id: int = ANONYMOUS_OWNER_ID) -> Link:
        """Store a new link under a fresh random id.

        The existence check in ``generate_unique`` is not atomic with the insert,
        so a concurrent writer can take the same id; the ``_id`` unique index
        rejects the loser, which then starts over with a new id.
        """
        url = normalize_url(url)
        for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
            link_id = await generate_unique(self.is_id_taken, self.universe, self.core.config.shortcode_length)
            link = Link(id=link_id, shortcode=encode(link_id, self.universe), url=url, owner_user_id=owner_user_id)
            try:
                await self._collection.insert_one(link.to_mongo())
            except DuplicateKeyError:
                logger.warning("link_id_race", link_id=link_id, attempt=attempt)
                continue
            logger.debug("link_created", link_id=link.id, shortcode=link.shortcode, owner_user_id=owner_user_id)
            return link
        raise ConflictError("Could not allocate a shortcode, please try again")

    async def resolve(self, shortcode: str) -> str:
        """Return the destination URL and count the click."""
        link = await self.get_link_by_shortcode(shortcode)
        await self.increment_clicks(link.id)
        return link.url

    async def increment_clicks(self, link_id: int) -> None:
        """Atomic ``$inc`` on the stored document, no read-modify-write."""
        result = await self._collection.update_one({"_id": link_id}, {"$inc": {"clicks": 1}})
        if result.matched_count == 0:
            logger.warning("click_count_missed", link_id=link_id)

    async def list_links_by_owner(self, owner_user_id: int) -> list[Link]:
        return await Link.list_cursor(self._collection.find({"owner_user_id": owner_user_id}).sort("created_at", -1))

    async def delete_link(self, shortcode: str, user: User) -> None:
        """Delete a link owned by the user. Admins may delete any link."""
        link = await self.get_link_by_shortcode(shortcode)
        if link.owner_user_id != user.id and not user.is_admin:
            raise AccessDeniedError("Access denied: link belongs to another user")
        await self._collection.delete_one({"_id": link.id})
        logger.info("link_deleted", link_id=link.id, user_id=user.id)
