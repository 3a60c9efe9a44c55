"""Random link id generation with a bounded uniqueness check."""

import random
from collections.abc import Awaitable, Callable

import structlog

from shortlink.core.modules.link.codec import decode
from shortlink.errors import IdSpaceExhaustedError

logger = structlog.get_logger(__name__)

MAX_ATTEMPTS = 10000


def max_id(universe: str, max_digits: int) -> int:
    """Largest id whose code fits in ``max_digits`` characters."""
    if max_digits < 1:
        raise ValueError("max_digits must be at least 1")
    return decode(universe[-1] * max_digits, universe)


def random_candidate(universe: str, max_digits: int) -> int:
    """Uniformly random id in ``[0, max_id]``, the largest representable id included."""
    return random.randint(0, max_id(universe, max_digits))


async def generate_unique(
    exists: Callable[[int], Awaitable[bool]],
    universe: str,
    max_digits: int,
    max_attempts: int = MAX_ATTEMPTS,
) -> int:
    """Draw candidates until ``exists`` reports a free one.

    The check is optimistic: nothing is locked between this call and the
    caller's insert, so the insert must still rely on the unique ``_id``.

    Raises:
        IdSpaceExhaustedError: If every attempt hit an existing id
    """
    for _ in range(max_attempts):
        candidate = random_candidate(universe, max_digits)
        if not await exists(candidate):
            return candidate

    logger.error("id_space_exhausted", attempts=max_attempts, universe_size=len(universe), max_digits=max_digits)
    raise IdSpaceExhaustedError(max_attempts)
