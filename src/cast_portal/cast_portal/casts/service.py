from __future__ import annotations

from typing import Optional

from ..core.exceptions import NotFoundError
from .model import Cast
from .repository import CastRepository


class CastService:
    def __init__(self, casts: CastRepository):
        self._casts = casts

    def resolve_store_id(self, cast_id: str, fallback: Optional[str] = None) -> str:
        """Use the caller-supplied store if any, otherwise the cast's own store."""
        if fallback:
            return fallback

        store_id = self._casts.get_store_id(cast_id=cast_id)
        if not store_id:
            raise NotFoundError("Cast not found")
        return store_id

    def get_for_store(self, cast_id: str, store_id: str) -> Cast:
        cast = self._casts.get_for_store(cast_id=cast_id, store_id=store_id)
        if not cast:
            raise NotFoundError("Cast not found or access denied")
        return cast

    def list_ids_for_store(self, store_id: str) -> list[str]:
        return list(self._casts.list_ids_for_store(store_id=store_id))
