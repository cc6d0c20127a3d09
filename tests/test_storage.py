"""Tests for the rating, stats, tier list, and pending item stores."""

import pytest
from sqlalchemy import false
from sqlmodel import select as sqlmodel_select

from tier_rating.core.errors import ConflictLostError
from tier_rating.models import ContentStats, PendingItem, TierList
from tier_rating.services.storage import (
    MemoryPendingItemStore,
    MemoryRatingStore,
    MemoryStatsStore,
    MemoryTierListStore,
    PendingItemRepository,
    PendingItemStore,
    RatingRepository,
    RatingStore,
    StatsRepository,
    StatsStore,
    TierListRepository,
    TierListStore,
    create_db_engine,
    rating_repository,
)


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'store.db'}")
    yield engine
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def rating_store(request, engine) -> RatingStore:
    if request.param == "memory":
        return MemoryRatingStore()
    return RatingRepository(engine)


@pytest.fixture(params=["memory", "sql"])
def stats_store(request, engine) -> StatsStore:
    if request.param == "memory":
        return MemoryStatsStore()
    return StatsRepository(engine)


@pytest.fixture(params=["memory", "sql"])
def tier_list_store(request, engine) -> TierListStore:
    if request.param == "memory":
        return MemoryTierListStore()
    return TierListRepository(engine)


@pytest.fixture(params=["memory", "sql"])
def pending_store(request, engine) -> PendingItemStore:
    if request.param == "memory":
        return MemoryPendingItemStore()
    return PendingItemRepository(engine)


class TestRatingStore:
    """Tests shared by every RatingStore implementation."""

    def test_implements_protocol(self, rating_store):
        """Test implementations satisfy the protocol."""
        assert isinstance(rating_store, RatingStore)

    async def test_upsert_creates(self, rating_store):
        """Test first submission creates a rating."""
        rating = await rating_store.upsert(
            "x", "alice", {"overall": "ding", "tags": ["fun"], "comment": "great"}
        )
        assert rating.content_id == "x"
        assert rating.rater_id == "alice"
        assert rating.overall == "ding"
        assert rating.tags == ["fun"]
        assert rating.dimensions == {}

    async def test_upsert_replaces_in_place(self, rating_store):
        """Test a second submission overwrites the same record."""
        first = await rating_store.upsert("x", "alice", {"overall": "zhong", "comment": "ok"})
        second = await rating_store.upsert(
            "x", "alice", {"overall": "shang", "dimensions": {"technical": "jia"}}
        )

        assert second.id == first.id
        assert second.created_at == first.created_at
        assert second.updated_at >= second.created_at
        assert second.overall == "shang"
        assert second.comment is None
        assert second.dimensions == {"technical": "jia"}

        stored = await rating_store.list_by_content("x")
        assert len(stored) == 1
        assert stored[0].overall == "shang"

    async def test_list_by_content(self, rating_store):
        """Test listing is scoped to one content item."""
        await rating_store.upsert("x", "alice", {"overall": "ding"})
        await rating_store.upsert("x", "bob", {"overall": "la"})
        await rating_store.upsert("y", "alice", {"overall": "jia"})

        ratings = await rating_store.list_by_content("x")
        assert sorted(r.rater_id for r in ratings) == ["alice", "bob"]
        assert await rating_store.list_by_content("z") == []

    async def test_list_by_rater(self, rating_store):
        """Test listing is scoped to one rater."""
        await rating_store.upsert("x", "alice", {"overall": "ding"})
        await rating_store.upsert("y", "alice", {"overall": "la"})
        await rating_store.upsert("y", "bob", {"overall": "jia"})

        ratings = await rating_store.list_by_rater("alice")
        assert sorted(r.content_id for r in ratings) == ["x", "y"]

    async def test_delete(self, rating_store):
        """Test delete reports whether a rating existed."""
        await rating_store.upsert("x", "alice", {"overall": "ding"})
        assert await rating_store.delete("x", "alice") is True
        assert await rating_store.delete("x", "alice") is False
        assert await rating_store.list_by_content("x") == []

    async def test_returned_rating_is_a_copy(self, rating_store):
        """Test mutating a returned rating does not change the store."""
        rating = await rating_store.upsert("x", "alice", {"overall": "ding", "tags": ["a"]})
        rating.tags.append("b")
        stored = await rating_store.list_by_content("x")
        assert stored[0].tags == ["a"]


class TestRatingRepositoryConflict:
    """Tests for the unique (content, rater) constraint under races."""

    async def test_losing_insert_reports_conflict(self, engine, monkeypatch):
        """Test an insert that loses to a committed row raises ConflictLostError."""
        repo = RatingRepository(engine)
        await repo.upsert("x", "alice", {"overall": "ding"})

        # Simulate a racing writer that did not see the committed row
        monkeypatch.setattr(
            rating_repository,
            "select",
            lambda model: sqlmodel_select(model).where(false()),
        )
        with pytest.raises(ConflictLostError) as exc_info:
            await repo.upsert("x", "alice", {"overall": "la"})
        assert exc_info.value.rater_id == "alice"

        monkeypatch.undo()
        stored = await repo.list_by_content("x")
        assert len(stored) == 1
        assert stored[0].overall == "ding"


class TestStatsStore:
    """Tests shared by every StatsStore implementation."""

    async def test_put_get(self, stats_store):
        """Test stats round-trip."""
        stats = ContentStats(content_id="x", count=2, mean=4.5, distribution={"a": 1, "b": 1})
        await stats_store.put(stats)
        assert await stats_store.get("x") == stats

    async def test_put_replaces(self, stats_store):
        """Test a second put replaces the row."""
        await stats_store.put(
            ContentStats(content_id="x", count=1, mean=3.0, distribution={"a": 1})
        )
        await stats_store.put(
            ContentStats(content_id="x", count=2, mean=5.0, distribution={"b": 2})
        )
        stored = await stats_store.get("x")
        assert stored.count == 2
        assert stored.distribution == {"b": 2}

    async def test_absent_and_remove(self, stats_store):
        """Test missing stats are None and remove is quiet."""
        assert await stats_store.get("x") is None
        await stats_store.put(
            ContentStats(content_id="x", count=1, mean=1.0, distribution={"a": 1})
        )
        await stats_store.remove("x")
        await stats_store.remove("x")
        assert await stats_store.get("x") is None

    async def test_list_all(self, stats_store):
        """Test listing every stored row."""
        await stats_store.put(ContentStats(content_id="b", count=1, mean=1.0))
        await stats_store.put(ContentStats(content_id="a", count=1, mean=2.0))
        assert [s.content_id for s in await stats_store.list_all()] == ["a", "b"]


class TestTierListStore:
    """Tests shared by every TierListStore implementation."""

    async def test_round_trip_preserves_order(self, tier_list_store):
        """Test bucket and item order survive persistence exactly."""
        buckets = {"s": ["z", "a", "m"], "a": [], "unranked": ["b", "c"]}
        tier_list = TierList(name="Games", buckets=buckets)
        await tier_list_store.save(tier_list)

        loaded = await tier_list_store.load(tier_list.id)
        assert loaded.name == "Games"
        assert list(loaded.buckets) == ["s", "a", "unranked"]
        assert loaded.buckets == buckets

    async def test_save_replaces(self, tier_list_store):
        """Test saving again replaces the stored buckets."""
        tier_list = TierList(name="Games", buckets={"s": ["a"], "unranked": []})
        await tier_list_store.save(tier_list)
        tier_list.buckets = {"s": [], "unranked": ["a"]}
        await tier_list_store.save(tier_list)

        loaded = await tier_list_store.load(tier_list.id)
        assert loaded.buckets == {"s": [], "unranked": ["a"]}
        assert len(await tier_list_store.list_all()) == 1

    async def test_load_missing_and_delete(self, tier_list_store):
        """Test missing lists load as None and delete reports existence."""
        assert await tier_list_store.load("nope") is None
        tier_list = TierList(name="Games")
        await tier_list_store.save(tier_list)
        assert await tier_list_store.delete(tier_list.id) is True
        assert await tier_list_store.delete(tier_list.id) is False


class TestPendingItemStore:
    """Tests shared by every PendingItemStore implementation."""

    async def test_add_list_delete(self, pending_store):
        """Test the pending item lifecycle."""
        item = await pending_store.add(PendingItem(name="Hades", category="game"))
        items = await pending_store.list_all()
        assert [i.id for i in items] == [item.id]
        assert items[0].category == "game"

        assert await pending_store.delete(item.id) is True
        assert await pending_store.delete(item.id) is False
        assert await pending_store.list_all() == []
