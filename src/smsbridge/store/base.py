"""Abstract base class for bridge account-data storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AccountDataStore(ABC):
    """Durable key/value storage for small JSON-like bridge records.

    Room classification is never stored here; it is always re-derived from
    live membership.
    """

    @abstractmethod
    async def get_account_data(self, key: str) -> dict[str, Any]:
        """Return the record stored under *key*, or an empty dict."""
        ...

    @abstractmethod
    async def set_account_data(self, key: str, record: dict[str, Any]) -> None:
        """Replace the record stored under *key*."""
        ...
