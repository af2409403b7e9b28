"""Base interface for list-backed queue stores."""

from abc import ABC, abstractmethod


class ListStore(ABC):
    """Abstract key-value list store (Redis list semantics)."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return backend identifier."""
        pass

    @abstractmethod
    async def push(self, key: str, value: str, *, head: bool = False) -> int:
        """Push ``value`` onto the tail (or head) of the list; return the new length."""
        pass

    @abstractmethod
    async def range(self, key: str, start: int = 0, end: int = -1) -> list:
        """Return list items between ``start`` and ``end`` inclusive (negative counts from the tail)."""
        pass

    @abstractmethod
    async def remove_one(self, key: str, value: str) -> int:
        """Remove the first occurrence of ``value``; return how many were removed."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the backend is reachable."""
        pass

    async def close(self) -> None:
        """Release network resources."""
        pass
