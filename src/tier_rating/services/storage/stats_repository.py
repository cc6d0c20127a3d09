"""Database persistence for cached content statistics."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlmodel import Session, col, select

from tier_rating.models import ContentStats, ContentStatsRecord

from .repository import AsyncRepository


class StatsRepository(AsyncRepository):
    """Persist and query ContentStats rows."""

    async def put(self, stats: ContentStats) -> None:
        """Save or replace the stats row for a content item."""

        def _save(session: Session) -> None:
            existing = session.get(ContentStatsRecord, stats.content_id)
            if existing:
                existing.count = stats.count
                existing.mean = stats.mean
                existing.distribution = dict(stats.distribution)
                existing.updated_at = datetime.now(UTC)
                session.add(existing)
            else:
                session.add(ContentStatsRecord.from_stats(stats))
            session.commit()

        await self._run_session(_save)

    async def get(self, content_id: str) -> ContentStats | None:
        def _get(session: Session) -> ContentStats | None:
            record = session.get(ContentStatsRecord, content_id)
            return record.to_stats() if record else None

        return await self._run_session(_get)

    async def remove(self, content_id: str) -> None:
        await self._delete_by_key(ContentStatsRecord, content_id)

    async def list_all(self) -> list[ContentStats]:
        def _get(session: Session) -> list[ContentStats]:
            statement = select(ContentStatsRecord).order_by(col(ContentStatsRecord.content_id))
            return [record.to_stats() for record in session.exec(statement).all()]

        return await self._run_session(_get)
