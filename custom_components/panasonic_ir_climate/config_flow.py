"""Config flow for Panasonic IR Climate."""
import logging
import voluptuous as vol
from tinytuya import Contrib

from .const import (
    CONF_CLIMATE_MODEL,
    CONF_LOCAL_KEY,
    CONF_PROTOCOL_VERSION,
    DEFAULT_FRIENDLY_NAME,
    DEFAULT_MODEL,
    DOMAIN,
    SUPPORTED_MODELS,
    TUYA_VERSIONS,
)

from homeassistant import config_entries
from homeassistant.core import callback
import homeassistant.helpers.config_validation as cv
from homeassistant.const import CONF_NAME, CONF_HOST, CONF_DEVICE_ID

_LOGGER = logging.getLogger(__name__)

class PanasonicIRClimateConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    VERSION = 1

    def __init__(self):
        self.config = {
            CONF_NAME: DEFAULT_FRIENDLY_NAME,
            CONF_DEVICE_ID: '',
            CONF_LOCAL_KEY: '',
            CONF_PROTOCOL_VERSION: 'Auto',
            CONF_HOST: '',
            CONF_CLIMATE_MODEL: DEFAULT_MODEL,
        }

    @staticmethod
    @callback
    def async_get_options_flow(entry):
        return PanasonicIRClimateOptionsFlow(entry)

    async def async_step_user(self, user_input=None):
        """Handle a flow initialized by the user."""
        errors = {}
        if user_input is not None:
            self.config.update(user_input)

            version_ok = await self._async_detect_version()
            if version_ok:
                self.config[CONF_PROTOCOL_VERSION] = version_ok
                return await self.async_step_climate_config()
            errors["base"] = "cannot_connect"

        schema = vol.Schema({
            vol.Required(CONF_NAME, default=self.config.get(CONF_NAME, DEFAULT_FRIENDLY_NAME)): cv.string,
            vol.Required(CONF_HOST, default=self.config.get(CONF_HOST, "")): cv.string,
            vol.Required(CONF_DEVICE_ID, default=self.config.get(CONF_DEVICE_ID, "")): cv.string,
            vol.Required(CONF_LOCAL_KEY, default=self.config.get(CONF_LOCAL_KEY, "")): cv.string,
        })

        return self.async_show_form(
            step_id="user",
            errors=errors,
            data_schema=schema
        )

    async def async_step_climate_config(self, user_input=None):
        """Remote model selection."""
        if user_input is not None:
            self.config[CONF_CLIMATE_MODEL] = user_input[CONF_CLIMATE_MODEL]

            await self.async_set_unique_id(self.config[CONF_DEVICE_ID])
            self._abort_if_unique_id_configured()
            return self.async_create_entry(
                title=self.config[CONF_NAME],
                data=self.config
            )

        schema = vol.Schema({
            vol.Required(CONF_CLIMATE_MODEL, default=self.config[CONF_CLIMATE_MODEL]): vol.In(SUPPORTED_MODELS),
        })

        return self.async_show_form(
            step_id="climate_config",
            data_schema=schema
        )

    async def _async_detect_version(self):
        """Try each Tuya protocol version until the device answers."""
        for version in TUYA_VERSIONS:
            status = await self.hass.async_add_executor_job(
                self._test_connection,
                self.config[CONF_DEVICE_ID],
                self.config[CONF_HOST],
                self.config[CONF_LOCAL_KEY],
                version
            )
            if status is not None and "Error" not in status:
                _LOGGER.debug("Connection successful with version %s", version)
                return version
            _LOGGER.debug("Version %s failed: %s", version, status)
        return None

    def _test_connection(self, dev_id, address, local_key, version):
        """Blocking connection test"""
        _LOGGER.debug("Testing connection to %s at %s with version %s", dev_id, address, version)
        try:
            device = Contrib.IRRemoteControlDevice(
                dev_id=dev_id,
                address=address,
                local_key=local_key,
                version=version,
                connection_timeout=10,
                connection_retry_limit=3
            )
            status = device.status()
            device.close()
            _LOGGER.debug("Connection test status: %s", status)
            return status
        except Exception as e:
            _LOGGER.error("Connection test failed: %s", e)
            return {"Error": str(e)}


class PanasonicIRClimateOptionsFlow(config_entries.OptionsFlow):
    """Options flow for Panasonic IR Climate."""

    def __init__(self, entry):
        self.entry = entry
        self.config = {**entry.data, **entry.options}

    async def async_step_init(self, user_input=None):
        """Manage the options."""
        if user_input is not None:
            _LOGGER.debug("Options user input: %s", user_input)
            return self.async_create_entry(title="", data=user_input)

        schema = vol.Schema({
            vol.Required(
                CONF_CLIMATE_MODEL,
                default=self.config.get(CONF_CLIMATE_MODEL, DEFAULT_MODEL)
            ): vol.In(SUPPORTED_MODELS),
        })

        return self.async_show_form(
            step_id="init",
            data_schema=schema
        )
