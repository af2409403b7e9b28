"""In-process list store for local development and tests."""

from .base import ListStore


class MemoryListStore(ListStore):
    def __init__(self):
        self._lists: dict[str, list] = {}

    @property
    def backend_name(self) -> str:
        return "memory"

    async def push(self, key: str, value: str, *, head: bool = False) -> int:
        items = self._lists.setdefault(key, [])
        if head:
            items.insert(0, value)
        else:
            items.append(value)
        return len(items)

    async def range(self, key: str, start: int = 0, end: int = -1) -> list:
        items = self._lists.get(key, [])
        size = len(items)
        if start < 0:
            start = max(size + start, 0)
        if end < 0:
            end = size + end
        return list(items[start:end + 1])

    async def remove_one(self, key: str, value: str) -> int:
        items = self._lists.get(key, [])
        try:
            items.remove(value)
        except ValueError:
            return 0
        return 1

    async def ping(self) -> bool:
        return True
