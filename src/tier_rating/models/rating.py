import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, UniqueConstraint
from sqlmodel import JSON, Field, SQLModel


class Rating(SQLModel, table=True):
    """One rater's level assignments for one content item."""

    __table_args__ = (UniqueConstraint("content_id", "rater_id", name="uq_rating_content_rater"),)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    content_id: str = Field(index=True)
    rater_id: str = Field(index=True)
    overall: str
    dimensions: dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON))
    comment: str | None = None
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
