"""Database persistence for tier lists and pending items."""

from __future__ import annotations

from sqlmodel import Session, col, select

from tier_rating.models import PendingItem, TierList

from .repository import AsyncRepository


def _detach(tier_list: TierList) -> TierList:
    """Copy a tier list so callers never share mutable bucket lists."""
    return TierList.model_validate(tier_list.model_dump())


class TierListRepository(AsyncRepository):
    """Persist and query tier lists."""

    async def save(self, tier_list: TierList) -> None:
        """Insert or fully replace a tier list."""
        data = tier_list.model_dump()

        def _save(session: Session) -> None:
            existing = session.get(TierList, data["id"])
            if existing:
                for key, value in data.items():
                    setattr(existing, key, value)
                session.add(existing)
            else:
                session.add(TierList.model_validate(data))
            session.commit()

        await self._run_session(_save)

    async def load(self, list_id: str) -> TierList | None:
        def _get(session: Session) -> TierList | None:
            tier_list = session.get(TierList, list_id)
            return _detach(tier_list) if tier_list else None

        return await self._run_session(_get)

    async def list_all(self) -> list[TierList]:
        def _get(session: Session) -> list[TierList]:
            statement = select(TierList).order_by(col(TierList.created_at))
            return [_detach(t) for t in session.exec(statement).all()]

        return await self._run_session(_get)

    async def delete(self, list_id: str) -> bool:
        return await self._delete_by_key(TierList, list_id)


class PendingItemRepository(AsyncRepository):
    """Persist and query pending items."""

    async def add(self, item: PendingItem) -> PendingItem:
        data = item.model_dump()

        def _save(session: Session) -> PendingItem:
            record = PendingItem.model_validate(data)
            session.add(record)
            session.commit()
            session.refresh(record)
            return record

        return await self._run_session(_save)

    async def list_all(self) -> list[PendingItem]:
        def _get(session: Session) -> list[PendingItem]:
            statement = select(PendingItem).order_by(col(PendingItem.created_at).desc())
            return list(session.exec(statement).all())

        return await self._run_session(_get)

    async def delete(self, item_id: str) -> bool:
        return await self._delete_by_key(PendingItem, item_id)
