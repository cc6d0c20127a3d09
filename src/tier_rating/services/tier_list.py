"""Manually ordered tier lists."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime

import structlog

from tier_rating.core.config import UNRANKED_BUCKET
from tier_rating.core.errors import (
    DuplicateItemError,
    MissingFieldError,
    NotFoundError,
    UnknownBucketError,
)
from tier_rating.models import ContentStats, TierList
from tier_rating.scoring import TierClassifier
from tier_rating.services.storage import TierListStore

logger = structlog.get_logger()


class TierListService:
    """Create, reorder, and persist tier lists.

    Bucket keys come from configuration plus the reserved ``unranked``
    bucket. An item reference lives in at most one bucket at a time.
    Concurrent writers are last-write-wins; single-item moves are safe to
    retry.
    """

    def __init__(self, bucket_keys: Sequence[str], store: TierListStore) -> None:
        """Initialize tier list service.

        Args:
            bucket_keys: Allowed bucket keys in display order.
            store: Tier list persistence.
        """
        keys = list(bucket_keys)
        if UNRANKED_BUCKET not in keys:
            keys.append(UNRANKED_BUCKET)
        self.bucket_keys = keys
        self._store = store

    def _check_bucket(self, key: str) -> None:
        if key not in self.bucket_keys:
            raise UnknownBucketError(key, self.bucket_keys)

    def _stored_buckets(self, tier_list: TierList) -> dict[str, list[str]]:
        """Copy a stored list's buckets laid out in configured order.

        Raises UnknownBucketError when items sit in a bucket that is no
        longer configured.
        """
        for key, items in tier_list.buckets.items():
            if items and key not in self.bucket_keys:
                raise UnknownBucketError(key, self.bucket_keys)
        return {key: list(tier_list.buckets.get(key, [])) for key in self.bucket_keys}

    def normalize_buckets(
        self, buckets: Mapping[str, Sequence[str]] | None
    ) -> dict[str, list[str]]:
        """Validate a bucket snapshot and lay it out in configured order.

        Missing buckets become empty; item order within each bucket is kept.
        """
        buckets = buckets or {}
        for key in buckets:
            self._check_bucket(key)

        seen: set[str] = set()
        result: dict[str, list[str]] = {}
        for key in self.bucket_keys:
            items = list(buckets.get(key, []))
            for item_ref in items:
                if item_ref in seen:
                    raise DuplicateItemError(item_ref)
                seen.add(item_ref)
            result[key] = items
        return result

    async def create(
        self,
        name: str,
        description: str | None = None,
        buckets: Mapping[str, Sequence[str]] | None = None,
    ) -> TierList:
        if not name or not name.strip():
            raise MissingFieldError("name")
        tier_list = TierList(
            name=name.strip(),
            description=description,
            buckets=self.normalize_buckets(buckets),
        )
        await self._store.save(tier_list)
        logger.info("tier_list_created", list_id=tier_list.id, name=tier_list.name)
        return tier_list

    async def get(self, list_id: str) -> TierList:
        tier_list = await self._store.load(list_id)
        if tier_list is None:
            raise NotFoundError("Tier list", list_id)
        return tier_list

    async def list_all(self) -> list[TierList]:
        return await self._store.list_all()

    async def replace_buckets(
        self, list_id: str, buckets: Mapping[str, Sequence[str]]
    ) -> TierList:
        """Replace the whole bucket-to-items mapping (drag-and-drop persistence)."""
        normalized = self.normalize_buckets(buckets)
        tier_list = await self.get(list_id)
        tier_list.buckets = normalized
        tier_list.updated_at = datetime.now(UTC)
        await self._store.save(tier_list)
        logger.info(
            "tier_list_replaced",
            list_id=list_id,
            items=sum(len(items) for items in normalized.values()),
        )
        return tier_list

    async def move_item(
        self, list_id: str, item_ref: str, from_bucket: str, to_bucket: str
    ) -> TierList:
        """Move an item from ``from_bucket`` to the end of ``to_bucket``.

        An item already in ``to_bucket``, or no longer in ``from_bucket``,
        leaves the list untouched. A stale retry therefore never undoes a
        later move, and new items go through ``add_item``.
        """
        if not item_ref:
            raise MissingFieldError("item_ref")
        self._check_bucket(from_bucket)
        self._check_bucket(to_bucket)
        tier_list = await self.get(list_id)

        buckets = self._stored_buckets(tier_list)
        if item_ref in buckets[to_bucket]:
            logger.debug(
                "tier_item_already_placed", list_id=list_id, item=item_ref, bucket=to_bucket
            )
            return tier_list
        if item_ref not in buckets[from_bucket]:
            logger.debug(
                "tier_item_not_in_source", list_id=list_id, item=item_ref, bucket=from_bucket
            )
            return tier_list

        buckets[from_bucket].remove(item_ref)
        buckets[to_bucket].append(item_ref)

        tier_list.buckets = buckets
        tier_list.updated_at = datetime.now(UTC)
        await self._store.save(tier_list)
        logger.info(
            "tier_item_moved",
            list_id=list_id,
            item=item_ref,
            from_bucket=from_bucket,
            to_bucket=to_bucket,
        )
        return tier_list

    async def add_item(
        self, list_id: str, item_ref: str, bucket: str = UNRANKED_BUCKET
    ) -> TierList:
        """Append a new item, by default to the unranked bucket."""
        if not item_ref:
            raise MissingFieldError("item_ref")
        self._check_bucket(bucket)
        tier_list = await self.get(list_id)
        if tier_list.find_item(item_ref) is not None:
            raise DuplicateItemError(item_ref)
        buckets = self._stored_buckets(tier_list)
        buckets[bucket].append(item_ref)
        tier_list.buckets = buckets
        tier_list.updated_at = datetime.now(UTC)
        await self._store.save(tier_list)
        logger.info("tier_item_added", list_id=list_id, item=item_ref, bucket=bucket)
        return tier_list

    async def delete(self, list_id: str) -> bool:
        deleted = await self._store.delete(list_id)
        if deleted:
            logger.info("tier_list_deleted", list_id=list_id)
        return deleted

    async def seed_from_stats(
        self,
        name: str,
        stats: Iterable[ContentStats],
        classifier: TierClassifier,
        description: str | None = None,
    ) -> TierList:
        """Create a list with content placed by classified mean score.

        A tier label maps to the bucket with the same key, case-insensitively;
        labels without a matching bucket land in ``unranked``. The list is
        independent of ratings once created.
        """
        buckets: dict[str, list[str]] = {key: [] for key in self.bucket_keys}
        by_label = {key.lower(): key for key in self.bucket_keys}
        for label, group in classifier.group(stats, lambda s: s.mean).items():
            target = by_label.get(label.lower(), UNRANKED_BUCKET)
            buckets[target].extend(s.content_id for s in group)
        return await self.create(name, description, buckets)
