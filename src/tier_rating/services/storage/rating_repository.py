"""Database persistence for rating records."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from tier_rating.core.errors import ConflictLostError
from tier_rating.models import Rating

from .base import normalize_rating_fields
from .repository import AsyncRepository

logger = structlog.get_logger()


class RatingRepository(AsyncRepository):
    """Persist and query rating records.

    The (content_id, rater_id) unique constraint decides concurrent first
    submissions: the losing insert fails and is reported as a conflict.
    """

    async def upsert(self, content_id: str, rater_id: str, fields: Mapping[str, Any]) -> Rating:
        """Create or replace the rating for a (content, rater) pair."""
        data = normalize_rating_fields(fields)

        def _upsert(session: Session) -> Rating:
            statement = select(Rating).where(
                Rating.content_id == content_id,
                Rating.rater_id == rater_id,
            )
            existing = session.exec(statement).first()
            if existing:
                for key, value in data.items():
                    setattr(existing, key, value)
                existing.updated_at = datetime.now(UTC)
                rating = existing
            else:
                rating = Rating(content_id=content_id, rater_id=rater_id, **data)
            session.add(rating)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise ConflictLostError(content_id, rater_id) from e
            session.refresh(rating)
            return rating

        rating = await self._run_session(_upsert)
        logger.debug("rating_upserted", content_id=content_id, rater_id=rater_id, id=rating.id)
        return rating

    async def list_by_content(self, content_id: str) -> list[Rating]:
        def _get(session: Session) -> list[Rating]:
            statement = (
                select(Rating)
                .where(Rating.content_id == content_id)
                .order_by(col(Rating.created_at))
            )
            return list(session.exec(statement).all())

        return await self._run_session(_get)

    async def list_by_rater(self, rater_id: str) -> list[Rating]:
        def _get(session: Session) -> list[Rating]:
            statement = (
                select(Rating)
                .where(Rating.rater_id == rater_id)
                .order_by(col(Rating.updated_at).desc())
            )
            return list(session.exec(statement).all())

        return await self._run_session(_get)

    async def delete(self, content_id: str, rater_id: str) -> bool:
        def _delete(session: Session) -> bool:
            statement = select(Rating).where(
                Rating.content_id == content_id,
                Rating.rater_id == rater_id,
            )
            existing = session.exec(statement).first()
            if existing is None:
                return False
            session.delete(existing)
            session.commit()
            return True

        return await self._run_session(_delete)
