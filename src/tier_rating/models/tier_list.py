import uuid
from datetime import UTC, datetime

from sqlalchemy import Column
from sqlmodel import JSON, Field, SQLModel


class TierList(SQLModel, table=True):
    """A named, ordered collection of buckets holding item references.

    ``buckets`` maps bucket key to the ordered item references in it. Key
    order follows the configured bucket order with ``unranked`` last.
    """

    __tablename__ = "tier_list"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(index=True)
    description: str | None = None
    buckets: dict[str, list[str]] = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def find_item(self, item_ref: str) -> str | None:
        """Return the bucket key holding ``item_ref``, if any."""
        for key, items in self.buckets.items():
            if item_ref in items:
                return key
        return None
