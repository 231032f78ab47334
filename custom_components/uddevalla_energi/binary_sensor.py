"""Binary sensor platform for Uddevalla Energi."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from homeassistant.components.binary_sensor import BinarySensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.event import async_track_time_change
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import (
    CONDITION_SECONDS,
    DOMAIN,
    KEY_MATAVFALL,
    KEY_RESTAVFALL,
    PICKUP_HOUR,
)
from .coordinator import UddevallaEnergiCoordinator
from .schedule import next_pickup


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the pickup tomorrow binary sensor."""
    coordinator: UddevallaEnergiCoordinator = hass.data[DOMAIN][entry.entry_id]

    async_add_entities([UddevallaEnergiPickupTomorrow(coordinator, entry)])


class UddevallaEnergiPickupTomorrow(CoordinatorEntity, BinarySensorEntity):
    """On when the next 06:00 pickup is less than 24 hours away."""

    _attr_icon = "mdi:delete-clock"

    def __init__(
        self, coordinator: UddevallaEnergiCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the binary sensor."""
        super().__init__(coordinator)
        self._attr_name = "Pickup tomorrow"
        self._attr_unique_id = f"{DOMAIN}_{entry.entry_id}_pickup_tomorrow"
        self._attr_is_on = False

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the dates the condition is based on."""
        store = self.coordinator.store
        pickup = next_pickup(store.get(KEY_MATAVFALL), store.get(KEY_RESTAVFALL))
        return {
            KEY_MATAVFALL: store.get(KEY_MATAVFALL),
            KEY_RESTAVFALL: store.get(KEY_RESTAVFALL),
            "next_pickup": pickup.isoformat() if pickup else None,
        }

    async def async_added_to_hass(self) -> None:
        """Evaluate now and whenever the 06:00 boundaries are crossed."""
        await super().async_added_to_hass()
        # Both transitions, into the 24h window and past the pickup, happen at 06:00 local
        self.async_on_remove(
            async_track_time_change(
                self.hass,
                self._async_evaluate,
                hour=PICKUP_HOUR,
                minute=0,
                second=CONDITION_SECONDS,
            )
        )
        await self._async_evaluate()

    @callback
    def _handle_coordinator_update(self) -> None:
        """Re-evaluate when pickup dates are refreshed."""
        self.hass.async_create_task(self._async_evaluate())

    async def _async_evaluate(self, now: datetime | None = None) -> None:
        """Evaluate the pickup condition and write the state."""
        self._attr_is_on = await self.coordinator.async_is_pickup_tomorrow(now)
        self.async_write_ha_state()
