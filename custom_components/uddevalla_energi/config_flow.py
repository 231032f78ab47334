"""Config flow for Uddevalla Energi integration."""
from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import HomeAssistant, callback
from homeassistant.data_entry_flow import FlowResult

from .api import UddevallaEnergiClient
from .const import CONF_ADDRESS, CONF_PLANT_NUMBER, DOMAIN, NAME
from .exceptions import AddressNotFound, AddressResolutionError

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_ADDRESS): vol.All(str, vol.Strip, vol.Length(min=1)),
    }
)


async def validate_input(hass: HomeAssistant, data: dict[str, Any]) -> dict[str, Any]:
    """Validate the address resolves to a plant number.

    Data has the keys from STEP_USER_DATA_SCHEMA with values provided by the user.
    """
    client = UddevallaEnergiClient()
    plant_number = await hass.async_add_executor_job(
        client.lookup_plant_number, data[CONF_ADDRESS]
    )

    return {"title": f"{NAME} - {data[CONF_ADDRESS]}", CONF_PLANT_NUMBER: plant_number}


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Uddevalla Energi."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}

        if user_input is not None:
            try:
                info = await validate_input(self.hass, user_input)
            except AddressNotFound:
                errors["base"] = "invalid_address"
            except AddressResolutionError:
                errors["base"] = "cannot_connect"
            except Exception:  # pylint: disable=broad-except
                _LOGGER.exception("Unexpected exception")
                errors["base"] = "unknown"
            else:
                await self.async_set_unique_id(str(info[CONF_PLANT_NUMBER]))
                self._abort_if_unique_id_configured()
                return self.async_create_entry(
                    title=info["title"],
                    data={
                        CONF_ADDRESS: user_input[CONF_ADDRESS],
                        CONF_PLANT_NUMBER: info[CONF_PLANT_NUMBER],
                    },
                )

        return self.async_show_form(
            step_id="user", data_schema=STEP_USER_DATA_SCHEMA, errors=errors
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> OptionsFlowHandler:
        """Get the options flow for this handler."""
        return OptionsFlowHandler()


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Handle changing the street address."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Manage the street address."""
        if user_input is not None:
            return self.async_create_entry(title="", data=user_input)

        current = self.config_entry.options.get(
            CONF_ADDRESS, self.config_entry.data.get(CONF_ADDRESS, "")
        )
        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_ADDRESS, default=current): vol.All(
                        str, vol.Strip, vol.Length(min=1)
                    ),
                }
            ),
        )
