import uuid
from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class PendingItem(SQLModel, table=True):
    """An item waiting to be rated or placed in a tier list."""

    __tablename__ = "pending_item"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str
    description: str | None = None
    category: str | None = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
