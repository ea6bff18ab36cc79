"""Bootstrap for the G4S SMART Alarm integration."""
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME, Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady
from homeassistant.helpers import device_registry as dr

from .const import (
    CONF_RETRY_BACKOFF_FACTOR,
    CONF_RETRY_TOTAL,
    DEFAULT_RETRY_BACKOFF_FACTOR,
    DEFAULT_RETRY_TOTAL,
    DOMAIN,
)
from .coordinator import G4SCoordinator
from .exceptions import AuthenticationFailed, RemoteUnavailable
from .g4s_client import G4SClient
from .helpers import get_device_info

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.ALARM_CONTROL_PANEL]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Log in, start polling and register the panel device."""
    opts = entry.options
    client = G4SClient(
        entry.data[CONF_USERNAME],
        entry.data[CONF_PASSWORD],
        retry_total=opts.get(CONF_RETRY_TOTAL, DEFAULT_RETRY_TOTAL),
        retry_backoff_factor=opts.get(
            CONF_RETRY_BACKOFF_FACTOR, DEFAULT_RETRY_BACKOFF_FACTOR
        ),
    )
    try:
        await hass.async_add_executor_job(client.login)
    except AuthenticationFailed as err:
        raise ConfigEntryAuthFailed(str(err)) from err
    except RemoteUnavailable as err:
        raise ConfigEntryNotReady(f"G4S service unavailable: {err}") from err

    coordinator = G4SCoordinator(hass, entry, client)
    await coordinator.async_config_entry_first_refresh()

    dr.async_get(hass).async_get_or_create(
        config_entry_id=entry.entry_id, **get_device_info(entry)
    )

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "coordinator": coordinator,
        "client": client,
    }

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    coordinator.async_start()
    _LOGGER.debug("G4S panel %s set up", coordinator.panel_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        data = hass.data[DOMAIN].pop(entry.entry_id)
        await data["coordinator"].async_shutdown()
        await hass.async_add_executor_job(data["client"].logout)
    return unload_ok
