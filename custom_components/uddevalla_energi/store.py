"""Persistent state for plant number and pickup dates."""
from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from .const import DOMAIN, STORAGE_VERSION
from .schedule import PickupRecord, WasteType

_LOGGER = logging.getLogger(__name__)

SAVE_DELAY = 1  # seconds

Subscriber = Callable[[str, Any], None]


class PickupStateStore:
    """Durable key-value store that notifies subscribers on every write."""

    def __init__(self, hass: HomeAssistant, entry_id: str) -> None:
        """Initialize the store."""
        self._store: Store = Store(hass, STORAGE_VERSION, f"{DOMAIN}.{entry_id}")
        self._data: dict[str, Any] = {}
        self._subscribers: dict[str, list[Subscriber]] = {}

    async def async_load(self) -> None:
        """Load persisted values."""
        try:
            stored = await self._store.async_load()
        except Exception:
            _LOGGER.exception("Failed to load stored pickup state, starting empty")
            stored = None

        self._data = dict(stored) if stored else {}
        _LOGGER.debug("Loaded pickup state: %s", self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the last written value for key, or default if never written."""
        return self._data.get(key, default)

    def keys(self) -> list[str]:
        """Return all keys that have been written."""
        return list(self._data)

    def record(self) -> PickupRecord:
        """Return the current pickup date per waste type."""
        return {
            waste_type: self._data[waste_type.value]
            for waste_type in WasteType
            if self._data.get(waste_type.value) is not None
        }

    def set(self, key: str, value: Any) -> None:
        """
        Write a value and notify subscribers of the key.

        Subscribers are notified on every call, even if the value is unchanged.
        """
        self._data[key] = value
        self._store.async_delay_save(lambda: dict(self._data), SAVE_DELAY)

        for handler in list(self._subscribers.get(key, [])):
            try:
                handler(key, value)
            except Exception:
                _LOGGER.exception("Error in subscriber for %s", key)

    def subscribe(self, key: str, handler: Subscriber) -> Callable[[], None]:
        """Subscribe to writes of key; returns a callable that unsubscribes."""
        self._subscribers.setdefault(key, []).append(handler)

        def unsubscribe() -> None:
            if handler in self._subscribers.get(key, []):
                self._subscribers[key].remove(handler)

        return unsubscribe
