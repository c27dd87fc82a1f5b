"""In-memory implementation of AccountDataStore."""

from __future__ import annotations

import copy
from typing import Any

from smsbridge.store.base import AccountDataStore


class InMemoryAccountDataStore(AccountDataStore):
    """Dict-based store for development and testing."""

    def __init__(self, initial: dict[str, dict[str, Any]] | None = None) -> None:
        self._data: dict[str, dict[str, Any]] = copy.deepcopy(initial or {})

    async def get_account_data(self, key: str) -> dict[str, Any]:
        return copy.deepcopy(self._data.get(key, {}))

    async def set_account_data(self, key: str, record: dict[str, Any]) -> None:
        self._data[key] = copy.deepcopy(record)
