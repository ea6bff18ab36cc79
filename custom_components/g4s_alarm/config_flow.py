# File: custom_components/g4s_alarm/config_flow.py

import logging

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.const import CONF_USERNAME, CONF_PASSWORD
from homeassistant.helpers import config_validation as cv
from homeassistant.components.persistent_notification import async_create as async_create_notification

from .const import (
    DOMAIN,
    CONF_PANEL_ID,
    CONF_UPDATE_INTERVAL,
    DEFAULT_UPDATE_INTERVAL,
    CONF_SUPPRESSION_WINDOW,
    DEFAULT_SUPPRESSION_WINDOW,
    CONF_RESUME_DELAY,
    DEFAULT_RESUME_DELAY,
    CONF_FETCH_TIMEOUT,
    DEFAULT_FETCH_TIMEOUT,
    CONF_RETRY_TOTAL,
    DEFAULT_RETRY_TOTAL,
    CONF_RETRY_BACKOFF_FACTOR,
    DEFAULT_RETRY_BACKOFF_FACTOR,
)
from .exceptions import AuthenticationFailed, RemoteUnavailable
from .g4s_client import G4SClient

_LOGGER = logging.getLogger(__name__)


def _login_and_get_panel_id(username: str, password: str) -> str:
    client = G4SClient(username, password)
    try:
        client.login()
        return client.get_panel_id()
    finally:
        client.logout()


class G4SAlarmConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Initial configuration flow for G4S SMART Alarm."""

    VERSION = 1

    async def async_step_user(self, user_input=None):
        errors = {}
        if user_input:
            username = user_input[CONF_USERNAME].strip()
            try:
                panel_id = await self.hass.async_add_executor_job(
                    _login_and_get_panel_id, username, user_input[CONF_PASSWORD]
                )
            except AuthenticationFailed:
                errors["base"] = "invalid_auth"
            except RemoteUnavailable as err:
                _LOGGER.warning("Could not reach G4S: %s", err)
                errors["base"] = "cannot_connect"
            else:
                await self.async_set_unique_id(panel_id)
                self._abort_if_unique_id_configured()
                return self.async_create_entry(
                    title="G4S Alarm",
                    data={
                        CONF_USERNAME: username,
                        CONF_PASSWORD: user_input[CONF_PASSWORD],
                        CONF_PANEL_ID: panel_id,
                    },
                )

        data_schema = vol.Schema({
            vol.Required(CONF_USERNAME): str,
            vol.Required(CONF_PASSWORD): str,
        })
        return self.async_show_form(step_id="user", data_schema=data_schema, errors=errors)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Options flow for advanced settings."""
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Handle options flow for G4S Alarm integration advanced settings."""

    def __init__(self, config_entry):
        self._entry = config_entry

    async def async_step_init(self, user_input=None):
        if user_input is not None:
            async_create_notification(
                self.hass,
                "Please restart Home Assistant for the G4S Alarm changes to take effect.",
                title="G4S Alarm Integration",
            )
            return self.async_create_entry(title="", data=user_input)

        opts = self._entry.options
        schema = vol.Schema({
            vol.Optional(
                CONF_UPDATE_INTERVAL,
                default=opts.get(CONF_UPDATE_INTERVAL, DEFAULT_UPDATE_INTERVAL),
            ): vol.All(vol.Coerce(float), vol.Range(min=1.0)),
            vol.Optional(
                CONF_SUPPRESSION_WINDOW,
                default=opts.get(CONF_SUPPRESSION_WINDOW, DEFAULT_SUPPRESSION_WINDOW),
            ): vol.All(vol.Coerce(float), vol.Range(min=0.0)),
            vol.Optional(
                CONF_RESUME_DELAY,
                default=opts.get(CONF_RESUME_DELAY, DEFAULT_RESUME_DELAY),
            ): vol.All(vol.Coerce(float), vol.Range(min=0.0)),
            vol.Optional(
                CONF_FETCH_TIMEOUT,
                default=opts.get(CONF_FETCH_TIMEOUT, DEFAULT_FETCH_TIMEOUT),
            ): vol.All(vol.Coerce(float), vol.Range(min=1.0)),
            vol.Optional(
                CONF_RETRY_TOTAL,
                default=opts.get(CONF_RETRY_TOTAL, DEFAULT_RETRY_TOTAL),
            ): vol.All(cv.positive_int),
            vol.Optional(
                CONF_RETRY_BACKOFF_FACTOR,
                default=opts.get(CONF_RETRY_BACKOFF_FACTOR, DEFAULT_RETRY_BACKOFF_FACTOR),
            ): vol.All(vol.Coerce(float), vol.Range(min=0.0)),
        })

        return self.async_show_form(step_id="init", data_schema=schema)
