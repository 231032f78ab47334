"""User notifications for the Uddevalla Energi integration."""
from __future__ import annotations

import logging
from typing import Any

from homeassistant.components import persistent_notification
from homeassistant.core import HomeAssistant
from homeassistant.helpers.translation import async_get_translations

from .const import DOMAIN, NAME, NOTIFICATION_MESSAGES

_LOGGER = logging.getLogger(__name__)


async def async_get_message(hass: HomeAssistant, key: str, **placeholders: Any) -> str:
    """Return the localized message for key, falling back to English."""
    template = NOTIFICATION_MESSAGES[key]
    try:
        translations = await async_get_translations(
            hass, hass.config.language, "exceptions", {DOMAIN}
        )
        template = translations.get(
            f"component.{DOMAIN}.exceptions.{key}.message", template
        )
    except Exception as err:
        _LOGGER.debug("Could not load translations, using English: %s", err)

    return template.format(**placeholders)


async def async_notify(hass: HomeAssistant, key: str, **placeholders: Any) -> None:
    """Show a persistent notification; repeats of the same key replace it."""
    message = await async_get_message(hass, key, **placeholders)
    _LOGGER.debug("Notifying: %s", message)
    persistent_notification.async_create(
        hass,
        f"{NAME}: {message}",
        title=NAME,
        notification_id=f"{DOMAIN}_{key}",
    )
