"""Async base for SQLModel repositories."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from sqlmodel import Session, SQLModel

if TYPE_CHECKING:
    from sqlalchemy import Engine

T = TypeVar("T")


class AsyncRepository:
    """Run sync SQLModel session work on a worker thread for async callers.

    Sessions keep objects loaded after commit, so rows can be handed back
    once the session closes.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    async def _run_session(self, fn: Callable[[Session], T]) -> T:
        def _run() -> T:
            with Session(self._engine, expire_on_commit=False) as session:
                return fn(session)

        return await asyncio.to_thread(_run)

    async def _delete_by_key(self, model: type[SQLModel], key: Any) -> bool:
        """Delete one row by primary key; False when it does not exist."""

        def _delete(session: Session) -> bool:
            row = session.get(model, key)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

        return await self._run_session(_delete)
