"""Data update coordinator for the Uddevalla Energi pickup schedule."""
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
import logging
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from homeassistant.util import dt as dt_util

from .api import UddevallaEnergiClient
from .const import (
    CONF_ADDRESS,
    CONF_PLANT_NUMBER,
    DOMAIN,
    EVENT_NEW_DATES_FOR_PICKUP,
    KEY_MATAVFALL,
    KEY_RESTAVFALL,
    NOTIFY_FETCH_PLANT_ERROR,
    NOTIFY_NEXT_DATE_IN_PAST,
    NOTIFY_NO_PLANT,
    NOTIFY_NO_STREET_ADDRESS,
    UPDATE_INTERVAL,
)
from .exceptions import MissingConfiguration, ScheduleFetchError, StaleScheduleData
from .notify import async_notify
from .schedule import PickupStatus, WasteType, detect_changes, evaluate_pickup
from .store import PickupStateStore

_LOGGER = logging.getLogger(__name__)


class UddevallaEnergiCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator that polls pickup dates and publishes changes."""

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        client: UddevallaEnergiClient,
        store: PickupStateStore,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name=DOMAIN,
            update_interval=UPDATE_INTERVAL,
        )
        self.entry = entry
        self.client = client
        self.store = store
        self._unsubscribers: list[Callable[[], None]] = []
        self._last_status: PickupStatus | None = None

    @property
    def plant_number(self) -> int:
        """Return the stored plant number, 0 if unset or invalid."""
        try:
            return int(self.store.get(CONF_PLANT_NUMBER, 0))
        except (TypeError, ValueError):
            return 0

    @property
    def address(self) -> str | None:
        """Return the configured street address."""
        return self.store.get(CONF_ADDRESS, self.entry.data.get(CONF_ADDRESS))

    def current_dates(self) -> dict[str, Any]:
        """Return the stored pickup dates keyed by waste type."""
        return {
            KEY_RESTAVFALL: self.store.get(KEY_RESTAVFALL),
            KEY_MATAVFALL: self.store.get(KEY_MATAVFALL),
        }

    def _require_plant_number(self) -> int:
        plant_number = self.plant_number
        if plant_number <= 0:
            raise MissingConfiguration(f"No valid plant number configured ({plant_number})")
        return plant_number

    async def async_startup(self) -> None:
        """Load stored state and fetch pickup dates if an address is configured."""
        await self.store.async_load()

        # Plant number resolved during the config flow seeds an empty store
        if CONF_PLANT_NUMBER not in self.store.keys():
            if plant_number := self.entry.data.get(CONF_PLANT_NUMBER):
                self.store.set(CONF_ADDRESS, self.entry.data.get(CONF_ADDRESS))
                self.store.set(CONF_PLANT_NUMBER, plant_number)

        self._unsubscribers.append(
            self.store.subscribe(CONF_PLANT_NUMBER, self._handle_plant_number)
        )

        try:
            self._require_plant_number()
        except MissingConfiguration:
            _LOGGER.warning(
                "No valid street address configured, please review integration options"
            )
            await async_notify(self.hass, NOTIFY_NO_STREET_ADDRESS)
            self.async_set_updated_data(self.current_dates())
            return

        await self.async_refresh()

    async def async_shutdown(self) -> None:
        """Drop store subscriptions and stop the coordinator."""
        while self._unsubscribers:
            self._unsubscribers.pop()()
        await super().async_shutdown()

    @callback
    def _handle_plant_number(self, key: str, value: Any) -> None:
        """Fetch pickup dates when a valid plant number is stored."""
        try:
            plant_number = int(value)
        except (TypeError, ValueError):
            return

        if plant_number > 0:
            self.hass.async_create_task(self.async_request_refresh())

    async def async_set_address(self, address: str) -> None:
        """Resolve a new street address and store its plant number."""
        address = (address or "").strip()
        if not address:
            await async_notify(self.hass, NOTIFY_NO_STREET_ADDRESS)
            return

        self.store.set(CONF_ADDRESS, address)
        resolution = await self.hass.async_add_executor_job(
            self.client.resolve_address, address
        )

        if resolution.error_kind == NOTIFY_NO_PLANT:
            await async_notify(self.hass, NOTIFY_NO_PLANT, address=address)
        elif resolution.error_kind == NOTIFY_FETCH_PLANT_ERROR:
            await async_notify(self.hass, NOTIFY_FETCH_PLANT_ERROR, error=resolution.error)
        else:
            _LOGGER.info(
                "Updated address %s resolved to plant number %s",
                address,
                resolution.plant_number,
            )

        self.store.set(CONF_PLANT_NUMBER, resolution.plant_number)

    async def _async_update_data(self) -> dict[str, Any]:
        """Fetch pickup dates and store the ones that changed."""
        try:
            plant_number = self._require_plant_number()
        except MissingConfiguration as err:
            _LOGGER.debug("Skipping pickup date update: %s", err)
            return self.current_dates()

        try:
            entries = await self.hass.async_add_executor_job(
                self.client.fetch_pickup_dates, plant_number
            )
        except ScheduleFetchError as err:
            raise UpdateFailed(f"Error communicating with API: {err}") from err

        updated, changed = detect_changes(self.store.record(), entries)
        for waste_type in WasteType:
            if waste_type in changed:
                _LOGGER.info("New date for %s: %s", waste_type.value, updated[waste_type])
                self.store.set(waste_type.value, updated[waste_type])

        dates = self.current_dates()
        if changed:
            self._fire_new_dates(dates)
        return dates

    def _fire_new_dates(self, dates: dict[str, Any]) -> None:
        """Fire the automation event for new pickup dates."""
        try:
            self.hass.bus.async_fire(EVENT_NEW_DATES_FOR_PICKUP, dict(dates))
        except Exception:
            _LOGGER.exception("Failed to fire %s", EVENT_NEW_DATES_FOR_PICKUP)
            return
        _LOGGER.debug("%s triggered", EVENT_NEW_DATES_FOR_PICKUP)

    def _evaluate(self, now: datetime) -> PickupStatus:
        return evaluate_pickup(
            now, self.store.get(KEY_MATAVFALL), self.store.get(KEY_RESTAVFALL)
        )

    def check_next_pickup(self, now: datetime) -> bool:
        """
        Return True if the next 06:00 pickup is less than 24 hours away.

        Raises:
            StaleScheduleData: If the next stored pickup has already passed
        """
        status = self._evaluate(now)

        if status is PickupStatus.STALE:
            raise StaleScheduleData("The time for next pickup is outdated")
        if status is PickupStatus.UNKNOWN:
            _LOGGER.warning("No pickup dates stored yet")
            return False
        if status is PickupStatus.IMMINENT:
            _LOGGER.debug("Less than 24 hours until next pickup")
            return True

        _LOGGER.debug("More than 24 hours until next pickup")
        return False

    async def async_is_pickup_tomorrow(self, now: datetime | None = None) -> bool:
        """
        Evaluate the pickup condition.

        A passed pickup date first triggers a refresh. The user is notified
        only if the dates are still in the past afterwards, and only once
        until the dates move forward again.
        """
        now = dt_util.as_local(now) if now else dt_util.now()

        try:
            result = self.check_next_pickup(now)
        except StaleScheduleData as err:
            if self._last_status is PickupStatus.STALE:
                _LOGGER.debug("%s, already reported", err)
                return False

            self._last_status = PickupStatus.STALE
            _LOGGER.info("%s, refreshing pickup dates", err)
            await self.async_refresh()

            try:
                result = self.check_next_pickup(now)
            except StaleScheduleData as stale_err:
                _LOGGER.warning("%s", stale_err)
                await async_notify(self.hass, NOTIFY_NEXT_DATE_IN_PAST)
                return False

        self._last_status = self._evaluate(now)
        return result
