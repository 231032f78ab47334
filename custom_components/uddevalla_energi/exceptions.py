"""Exceptions for the Uddevalla Energi integration."""
from __future__ import annotations

from homeassistant.exceptions import HomeAssistantError


class UddevallaEnergiError(HomeAssistantError):
    """Base error for the Uddevalla Energi integration."""


class AddressNotFound(UddevallaEnergiError):
    """Error to indicate the address did not match any plant."""


class AddressResolutionError(UddevallaEnergiError):
    """Error to indicate the address lookup failed in transport or parsing."""


class ScheduleFetchError(UddevallaEnergiError):
    """Error to indicate the pickup schedule could not be fetched."""


class StaleScheduleData(UddevallaEnergiError):
    """Error to indicate the next stored pickup is already in the past."""


class MissingConfiguration(UddevallaEnergiError):
    """Error to indicate no plant number is configured."""
