"""Tests for the pending item catalog."""

import pytest

from tier_rating.core.errors import MissingFieldError, NotFoundError
from tier_rating.services.pending import PendingItemService
from tier_rating.services.storage import MemoryPendingItemStore


@pytest.fixture
def service() -> PendingItemService:
    return PendingItemService(MemoryPendingItemStore())


class TestPendingItemService:
    """Tests for PendingItemService."""

    async def test_add_and_list(self, service):
        """Test items are listed newest first."""
        first = await service.add("Hades", "roguelike", "game")
        second = await service.add(" Celeste ")
        items = await service.list_all()
        assert [i.id for i in items] == [second.id, first.id]
        assert items[0].name == "Celeste"
        assert items[1].category == "game"

    async def test_add_requires_name(self, service):
        """Test the name is mandatory."""
        with pytest.raises(MissingFieldError):
            await service.add("")

    async def test_delete(self, service):
        """Test deleting items."""
        item = await service.add("Hades")
        await service.delete(item.id)
        assert await service.list_all() == []
        with pytest.raises(NotFoundError):
            await service.delete(item.id)
