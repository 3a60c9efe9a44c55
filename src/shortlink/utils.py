import time
from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def now_unix() -> int:
    """Current time in whole seconds since the epoch."""
    return int(time.time())


def unix_to_datetime(value: int) -> datetime:
    return datetime.fromtimestamp(value, UTC)
