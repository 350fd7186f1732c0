"""In-memory keyed stores owned by the application.

Stores live for the lifetime of the process and are only touched from the
event loop, so no locking is done. Concurrent updates to the same key are
last-writer-wins.
"""

import uuid
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class KeyedStore(Generic[T]):
    """A dictionary with generated identifiers."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix
        self._items: dict[str, T] = {}

    def new_id(self) -> str:
        """Generate an identifier not already present in the store."""
        while True:
            item_id = f"{self.prefix}{uuid.uuid4().hex[:7]}"
            if item_id not in self._items:
                return item_id

    def put(self, item_id: str, item: T) -> None:
        self._items[item_id] = item

    def get(self, item_id: str) -> Optional[T]:
        return self._items.get(item_id)

    def delete(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None

    def values(self) -> list[T]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items


class ProjectStore(KeyedStore[dict[str, Any]]):
    """Saved audit projects."""

    def __init__(self):
        super().__init__(prefix="p")

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Store a project; the generated id and timestamp override any given ones."""
        project = {**data, "id": self.new_id(), "createdAt": datetime.now().isoformat()}
        self.put(project["id"], project)
        return project
