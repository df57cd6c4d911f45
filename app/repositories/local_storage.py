"""Repository layer for the local key-value store and the caches on top of it.

Provides async get/set/delete for LocalStorageModel plus load/save helpers
binding a TTLCache to a fixed storage key.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.db import LocalStorageModel
from design2api.cache import TTLCache


class LocalStorageRepository:
    """Data access layer for serialized blobs under fixed keys."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, key: str) -> Optional[str]:
        """Stored value for key, or None."""
        row = await self._get_row(key)
        return row.value if row else None

    async def set(self, key: str, value: str) -> LocalStorageModel:
        """Insert or overwrite the value under key."""
        row = await self._get_row(key)
        if row is None:
            row = LocalStorageModel(key=key, value=value)
            self.session.add(row)
        else:
            row.value = value
        await self.session.flush()
        return row

    async def delete(self, key: str) -> bool:
        row = await self._get_row(key)
        if not row:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    async def _get_row(self, key: str) -> Optional[LocalStorageModel]:
        result = await self.session.execute(
            select(LocalStorageModel).where(LocalStorageModel.key == key)
        )
        return result.scalar_one_or_none()


async def load_cache(
    repo: LocalStorageRepository,
    storage_key: str,
    payload_field: str,
    **cache_kwargs: Any,
) -> TTLCache:
    """Load a TTLCache from storage; rewrite storage at once if stale entries were pruned.

    The rewrite is committed immediately, so it survives a later rollback of
    the request. A cache pruned down to nothing removes its storage row.
    """
    cache, dropped = TTLCache.from_snapshot(
        payload_field, await repo.get(storage_key), **cache_kwargs
    )
    if dropped:
        if len(cache):
            await repo.set(storage_key, cache.dumps())
        else:
            await repo.delete(storage_key)
        await repo.session.commit()
    return cache


async def save_cache(repo: LocalStorageRepository, storage_key: str, cache: TTLCache) -> None:
    await repo.set(storage_key, cache.dumps())
