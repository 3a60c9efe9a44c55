from typing import Any

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from shortlink.core.core import Service
from shortlink.core.modules.counter.models import Counter, CounterType


class CounterService(Service):
    """Allocates auto-increment ids, starting at 1."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("counters")

    async def get_next_sequence(self, counter_type: CounterType) -> int:
        """Reserve the next id. A single ``$inc`` upsert, so concurrent callers never share one."""
        doc = await self._collection.find_one_and_update(
            {"_id": counter_type}, {"$inc": {"seq": 1}}, upsert=True, return_document=ReturnDocument.AFTER
        )
        return Counter.model_validate(doc).seq
