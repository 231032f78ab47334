"""Sensor platform for Uddevalla Energi pickup dates."""
from __future__ import annotations

from datetime import date
import logging
from typing import Any

from homeassistant.components.sensor import SensorDeviceClass, SensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import UddevallaEnergiCoordinator
from .schedule import WasteType, parse_pickup_date

_LOGGER = logging.getLogger(__name__)

WASTE_TYPE_NAMES = {
    WasteType.ORGANIC: "Next matavfall",
    WasteType.RESIDUAL: "Next restavfall",
}


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the pickup date sensors."""
    coordinator: UddevallaEnergiCoordinator = hass.data[DOMAIN][entry.entry_id]

    async_add_entities(
        UddevallaEnergiPickupSensor(coordinator, entry, waste_type)
        for waste_type in WasteType
    )


class UddevallaEnergiPickupSensor(SensorEntity):
    """Next pickup date for one waste type, updated on every store write."""

    _attr_device_class = SensorDeviceClass.DATE
    _attr_icon = "mdi:trash-can-outline"
    _attr_should_poll = False

    def __init__(
        self,
        coordinator: UddevallaEnergiCoordinator,
        entry: ConfigEntry,
        waste_type: WasteType,
    ) -> None:
        """Initialize the sensor."""
        self.coordinator = coordinator
        self.waste_type = waste_type
        self._attr_name = WASTE_TYPE_NAMES[waste_type]
        self._attr_unique_id = f"{DOMAIN}_{entry.entry_id}_next_{waste_type.value}"
        self._raw_value: str | None = coordinator.store.get(waste_type.value)

    @property
    def native_value(self) -> date | None:
        """Return the next pickup date."""
        return parse_pickup_date(self._raw_value)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the raw date as reported by the service."""
        return {"pickup_date": self._raw_value}

    async def async_added_to_hass(self) -> None:
        """Subscribe to store writes for this waste type."""
        await super().async_added_to_hass()
        self.async_on_remove(
            self.coordinator.store.subscribe(self.waste_type.value, self._handle_store_set)
        )

    @callback
    def _handle_store_set(self, key: str, value: Any) -> None:
        """Publish the new date."""
        _LOGGER.debug("New date for %s: %s", key, value)
        self._raw_value = value
        self.async_write_ha_state()
