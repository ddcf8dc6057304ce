"""
Client-side read-through cache of the last fetched page.

Only the controllers write to a PageCache. A fetch replaces the cached page
wholesale; nothing is merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Generic, List, Optional, TypeVar

from app.schemas.base import Page

T = TypeVar("T")


@dataclass
class PageCache(Generic[T]):
    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 0
    total_pages: int = 0
    loaded: bool = False

    def replace(self, page: Page[T]) -> None:
        self.items = list(page.items)
        self.total = page.total
        self.page = page.page
        self.page_size = page.page_size
        self.total_pages = page.total_pages
        self.loaded = True

    def snapshot(self) -> "PageCache[T]":
        return replace(self, items=list(self.items))

    def restore(self, snapshot: "PageCache[T]") -> None:
        self.items = list(snapshot.items)
        self.total = snapshot.total
        self.page = snapshot.page
        self.page_size = snapshot.page_size
        self.total_pages = snapshot.total_pages
        self.loaded = snapshot.loaded

    def index_of(self, item_id: str) -> Optional[int]:
        for index, item in enumerate(self.items):
            if getattr(item, "id") == item_id:
                return index
        return None

    def find(self, item_id: str) -> Optional[T]:
        index = self.index_of(item_id)
        return None if index is None else self.items[index]

    def put(self, item: T) -> None:
        """Swap in a fresh copy of an item already on the page."""
        index = self.index_of(getattr(item, "id"))
        if index is not None:
            self.items[index] = item

    def update_item(self, item_id: str, **changes: Any) -> None:
        index = self.index_of(item_id)
        if index is not None:
            self.items[index] = self.items[index].model_copy(update=changes)
