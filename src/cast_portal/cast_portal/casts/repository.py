from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Cast


class CastRepository(Protocol):
    def get_for_store(self, *, cast_id: str, store_id: str) -> Optional[Cast]:
        """Return the cast only when it belongs to `store_id`."""

        raise NotImplementedError

    def get_store_id(self, *, cast_id: str) -> Optional[str]:
        raise NotImplementedError

    def list_ids_for_store(self, *, store_id: str) -> Sequence[str]:
        raise NotImplementedError
