from enum import StrEnum

from pydantic import BaseModel, Field


class CounterType(StrEnum):
    """Entities numbered from a shared sequence. Link and session ids are random and never counted."""

    USER = "user"


class Counter(BaseModel):
    """One document per ``CounterType`` in the ``counters`` collection."""

    counter_type: CounterType = Field(alias="_id")
    seq: int = 0  # Last id handed out
