from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from shortlink.config import Config

logger = structlog.get_logger(__name__)

# Registry attribute -> "module:Class". Started in this order and stopped in reverse.
# The counter precedes users because the admin bootstrap allocates a user id.
SERVICE_REGISTRY: tuple[tuple[str, str], ...] = (
    ("counter", "shortlink.core.modules.counter.service:CounterService"),
    ("user", "shortlink.core.modules.user.service:UserService"),
    ("session", "shortlink.core.modules.session.service:SessionService"),
    ("link", "shortlink.core.modules.link.service:LinkService"),
    ("access", "shortlink.core.modules.access.service:AccessService"),
)


def database_name(database_url: str) -> str:
    """Database name from the path of a MongoDB URL."""
    name = urlparse(database_url).path.lstrip("/")
    if not name:
        raise ValueError(f"database_url has no database name: {database_url!r}")
    return name


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Called once on startup, e.g. to create indexes."""

    async def on_stop(self) -> None:
        """Called once on shutdown."""

    @property
    def core(self) -> Core:
        if self._core is None:
            raise RuntimeError(f"{type(self).__name__} is not attached to a Core")
        return self._core

    def set_core(self, core: Core) -> None:
        self._core = core


class Services:
    """All services of the application, one instance each, sharing one database."""

    from shortlink.core.modules.access.service import AccessService  # noqa: PLC0415
    from shortlink.core.modules.counter.service import CounterService  # noqa: PLC0415
    from shortlink.core.modules.link.service import LinkService  # noqa: PLC0415
    from shortlink.core.modules.session.service import SessionService  # noqa: PLC0415
    from shortlink.core.modules.user.service import UserService  # noqa: PLC0415

    counter: CounterService
    user: UserService
    session: SessionService
    link: LinkService
    access: AccessService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._services: list[Service] = []
        for attr_name, target in SERVICE_REGISTRY:
            module_path, class_name = target.split(":")
            service_class = cast(type[Service], getattr(importlib.import_module(module_path), class_name))
            service = service_class(database)
            setattr(self, attr_name, service)
            self._services.append(service)

    def set_core(self, core: Core) -> None:
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Owns the config, the MongoDB client and the services built on it."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url)
        self.database = self.mongo_client.get_database(database_name(config.database_url))
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Start services on enter, stop them and close the client on exit."""
        await self.services.start_all()
        logger.info("core_started", database=self.database.name, services=[name for name, _ in SERVICE_REGISTRY])
        try:
            yield
        finally:
            await self.services.stop_all()
            await self.mongo_client.aclose()
            logger.info("core_stopped")
