"""Client for the Uddevalla Energi pickup schedule service."""
from __future__ import annotations

import logging
from typing import NamedTuple

import requests

from .const import (
    API_ADDRESS_URL,
    API_NEXT_PICKUP_URL,
    API_TIMEOUT,
    NOTIFY_FETCH_PLANT_ERROR,
    NOTIFY_NO_PLANT,
    PLANT_NUMBER_ERROR,
    PLANT_NUMBER_UNKNOWN,
)
from .exceptions import AddressNotFound, AddressResolutionError, ScheduleFetchError
from .schedule import PickupEntry, parse_schedule

_LOGGER = logging.getLogger(__name__)


class AddressResolution(NamedTuple):
    """Outcome of resolving a street address to a plant number."""

    plant_number: int
    error_kind: str | None = None
    error: str | None = None


class UddevallaEnergiClient:
    """Client for interacting with the Uddevalla Energi app API."""

    def __init__(self):
        """Initialize the client."""
        self.address_url = API_ADDRESS_URL
        self.next_pickup_url = API_NEXT_PICKUP_URL

    def lookup_plant_number(self, address: str) -> int:
        """
        Look up the plant number for a street address.

        Args:
            address: Street address in Uddevalla

        Returns:
            Plant number of the first matching address

        Raises:
            AddressNotFound: If the address does not match any plant
            AddressResolutionError: If the request or response handling fails
        """
        _LOGGER.debug("Looking up address: %s", address)

        try:
            response = requests.get(
                self.address_url, params={"address": address}, timeout=API_TIMEOUT
            )
            response.raise_for_status()
            if not response.content.strip():
                raise AddressNotFound(f"Address not found: {address}")
            data = response.json()
        except requests.RequestException as err:
            raise AddressResolutionError(str(err)) from err
        except ValueError as err:
            raise AddressResolutionError(f"Invalid response: {err}") from err

        if not data:
            raise AddressNotFound(f"Address not found: {address}")

        if len(data) > 1:
            _LOGGER.debug(
                "Address %s matched %d plants, using the first", address, len(data)
            )

        try:
            plant_number = int(data[0]["plant_number"])
        except (KeyError, IndexError, TypeError, ValueError) as err:
            raise AddressResolutionError(f"Invalid response: {err}") from err

        if plant_number <= 0:
            raise AddressResolutionError(f"Invalid plant number in response: {plant_number}")

        _LOGGER.info("Address %s resolved to plant number %s", address, plant_number)
        return plant_number

    def resolve_address(self, address: str) -> AddressResolution:
        """
        Resolve an address, reporting failures as plant number sentinels.

        Returns:
            A positive plant number on success, 0 if the address is unmatched
            and -1 if the lookup failed
        """
        if not address:
            raise ValueError("Street address must not be empty")

        try:
            return AddressResolution(self.lookup_plant_number(address))
        except AddressNotFound:
            _LOGGER.warning(
                "Was unable to fetch a plant number for address %s", address
            )
            return AddressResolution(PLANT_NUMBER_UNKNOWN, NOTIFY_NO_PLANT)
        except AddressResolutionError as err:
            _LOGGER.error("There was an error fetching plant number for address: %s", err)
            return AddressResolution(PLANT_NUMBER_ERROR, NOTIFY_FETCH_PLANT_ERROR, str(err))

    def fetch_pickup_dates(self, plant_number: int) -> list[PickupEntry]:
        """
        Fetch the next pickup date per waste type.

        Raises:
            ValueError: If plant_number is not a resolved identifier
            ScheduleFetchError: If the request or response handling fails
        """
        if plant_number <= 0:
            raise ValueError(f"Invalid plant number: {plant_number}")

        _LOGGER.debug("Updating dates for plant number %s", plant_number)

        try:
            response = requests.get(
                self.next_pickup_url,
                params={"plant_number": plant_number},
                timeout=API_TIMEOUT,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as err:
            raise ScheduleFetchError(str(err)) from err
        except ValueError as err:
            raise ScheduleFetchError(f"Invalid response: {err}") from err

        return parse_schedule(payload)
