"""The Uddevalla Energi pickup schedule integration."""
from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.typing import ConfigType

from .api import UddevallaEnergiClient
from .const import CONF_ADDRESS, DOMAIN, NAME, SERVICE_REFRESH
from .coordinator import UddevallaEnergiCoordinator
from .store import PickupStateStore

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [Platform.SENSOR, Platform.BINARY_SENSOR]

CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Set up the Uddevalla Energi component."""
    hass.data.setdefault(DOMAIN, {})

    async def async_handle_refresh(call: ServiceCall) -> None:
        """Force a pickup date update for every configured address."""
        for coordinator in list(hass.data[DOMAIN].values()):
            if coordinator.plant_number <= 0 and coordinator.address:
                _LOGGER.debug("Retrying address lookup for %s", coordinator.address)
                await coordinator.async_set_address(coordinator.address)
            else:
                await coordinator.async_request_refresh()

    hass.services.async_register(DOMAIN, SERVICE_REFRESH, async_handle_refresh)
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Uddevalla Energi from a config entry."""
    store = PickupStateStore(hass, entry.entry_id)
    coordinator = UddevallaEnergiCoordinator(hass, entry, UddevallaEnergiClient(), store)

    await coordinator.async_startup()

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = coordinator

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(async_update_options))

    return True


async def async_update_options(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Resolve the street address when it is changed in the options."""
    coordinator: UddevallaEnergiCoordinator = hass.data[DOMAIN][entry.entry_id]
    address = entry.options.get(CONF_ADDRESS)

    if address and address != coordinator.address:
        _LOGGER.debug("Street address changed to %s", address)
        await coordinator.async_set_address(address)

        if coordinator.plant_number > 0:
            hass.config_entries.async_update_entry(
                entry,
                title=f"{NAME} - {address}",
                unique_id=str(coordinator.plant_number),
            )


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    if unload_ok := await hass.config_entries.async_unload_platforms(entry, PLATFORMS):
        coordinator = hass.data[DOMAIN].pop(entry.entry_id)
        await coordinator.async_shutdown()

    return unload_ok
