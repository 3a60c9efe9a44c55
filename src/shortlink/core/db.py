from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor

# Range of a BSON int64, the type every integer ``_id`` is stored as
MIN_INT64 = -(2**63)
MAX_INT64 = 2**63 - 1


class MongoModel(BaseModel):
    """Stored document keyed by an integer ``_id``, exposed as ``id``."""

    id: int = Field(alias="_id", serialization_alias="id", ge=MIN_INT64, le=MAX_INT64)

    model_config = ConfigDict(populate_by_name=True)

    def to_mongo(self) -> dict[str, Any]:
        return {"_id": self.id, **self.model_dump(exclude={"id"})}

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        return [cls.model_validate(doc) async for doc in cursor]
