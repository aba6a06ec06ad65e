"""Support for Panasonic IR Climate Control through a Tuya IR blaster."""
import logging
import threading
from tinytuya import Contrib

from homeassistant.components.climate import (
    ClimateEntity,
    ClimateEntityFeature,
    HVACMode,
)
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity import DeviceInfo

from .climate_protocols import get_protocol
from .const import (
    CLIMATE_BRAND,
    CONF_CLIMATE_MODEL,
    DEFAULT_FRIENDLY_NAME,
    DEFAULT_MODEL,
    DOMAIN,
    TUYA_MAX_PULSE,
)

_LOGGER = logging.getLogger(__name__)

# HVAC Mode mapping - string değerlerini enum'a çevir
HVAC_MODE_MAPPING = {
    "off": HVACMode.OFF,
    "heat": HVACMode.HEAT,
    "cool": HVACMode.COOL,
    "heat_cool": HVACMode.HEAT_COOL,
    "auto": HVACMode.AUTO,
    "dry": HVACMode.DRY,
    "fan_only": HVACMode.FAN_ONLY,
}

async def async_setup_entry(hass, entry, async_add_entities):
    """Set up platform from config entry."""
    _LOGGER.debug("Setting up entry: %s", entry.data)
    config = {**entry.data, **entry.options}

    climate = PanasonicIRClimate(
        hass=hass,
        name=config.get("name", DEFAULT_FRIENDLY_NAME),
        dev_id=config.get("device_id"),
        address=config.get("host"),
        local_key=config.get("local_key"),
        protocol_version=config.get("protocol_version"),
        climate_model=config.get(CONF_CLIMATE_MODEL, DEFAULT_MODEL),
    )

    await hass.async_add_executor_job(climate._update_availability)
    async_add_entities([climate])


def clip_pulses(pulses):
    """Tuya codes can't hold durations over 16 bits, shorten the long gaps."""
    return [min(int(round(pulse)), TUYA_MAX_PULSE) for pulse in pulses]


def _option_value(option):
    """Accept enum or plain string values from Home Assistant."""
    if hasattr(option, 'value'):
        return option.value
    return str(option)


class PanasonicIRClimate(ClimateEntity):
    def __init__(self, hass, name, dev_id, address, local_key, protocol_version, climate_model=DEFAULT_MODEL):
        """Initialize the climate device."""
        self.hass = hass
        self._attr_name = name
        self._attr_has_entity_name = True
        self._dev_id = dev_id
        self._address = address
        self._local_key = local_key
        # Protocol version'ı float'a çevir (Auto ise 3.3 kullan)
        self._protocol_version = float(protocol_version) if protocol_version not in (None, "Auto") else 3.3
        self._climate_model = climate_model

        self._protocol = get_protocol(CLIMATE_BRAND, model=climate_model)

        self._device = None
        self._available = False
        self._lock = threading.Lock()

        self._hvac_mode = "off"
        self._target_temperature = 24
        self._fan_mode = "auto"
        self._swing_mode = "off"
        self._preset_mode = "none"

        _LOGGER.debug("Climate entity initialized: %s (ID: %s, model: %s)", name, dev_id, climate_model)

    def _init_device(self):
        if self._device:
            return

        _LOGGER.debug("Initializing device %s with version %s", self._dev_id, self._protocol_version)
        self._device = Contrib.IRRemoteControlDevice(
            dev_id=self._dev_id,
            address=self._address,
            local_key=self._local_key,
            version=self._protocol_version,
            persist=True,
            connection_timeout=10,
            connection_retry_limit=3
        )

    def _deinit_device(self):
        if self._device:
            try:
                self._device.close()
            except Exception as e:
                _LOGGER.debug("Error closing device %s: %s", self._dev_id, e)
            finally:
                self._device = None

    def _ensure_connection(self):
        """Ensure device connection is active"""
        if not self._device:
            self._init_device()
            return self._device is not None

        try:
            self._device.status()
            return True
        except Exception as e:
            _LOGGER.debug("Connection lost, reinitializing: %s", e)
            self._deinit_device()
            self._init_device()
            return self._device is not None

    def _update_availability(self):
        with self._lock:
            try:
                if not self._ensure_connection():
                    self._available = False
                    return

                status = self._device.status()
                self._available = status is not None
                _LOGGER.debug("Device %s availability: %s", self._dev_id, self._available)

            except Exception as e:
                self._available = False
                _LOGGER.debug("Availability check failed for %s: %s", self._dev_id, e)
                self._deinit_device()

    def _send_ir_command_sync(self, pulses):
        """Sync version of IR command sending"""
        with self._lock:
            try:
                if not self._ensure_connection():
                    raise HomeAssistantError("Cannot establish connection to device")

                _LOGGER.debug("Sending IR command with %d pulses", len(pulses))
                b64 = Contrib.IRRemoteControlDevice.pulses_to_base64(clip_pulses(pulses))
                result = self._device.send_button(b64)

                if result and "Error" in result:
                    _LOGGER.error("Failed to send IR command: %s", result)
                    raise HomeAssistantError(f"Tuya device error: {result}")

                _LOGGER.debug("IR command sent successfully")
                return True

            except HomeAssistantError:
                self._deinit_device()
                raise
            except Exception as e:
                self._deinit_device()
                _LOGGER.error("Failed to send IR command: %s", e)
                raise HomeAssistantError(f"Failed to send IR command: {e}") from e

    async def _send_ir_command(self, pulses):
        """Send IR command to device - async version"""
        try:
            await self.hass.async_add_executor_job(self._send_ir_command_sync, pulses)
        except HomeAssistantError:
            self._available = False
            raise

    @property
    def name(self):
        """Return the name of the climate device."""
        return self._attr_name

    @property
    def available(self):
        return self._available

    @property
    def unique_id(self):
        return f"{DOMAIN}_{self._dev_id}"

    @property
    def temperature_unit(self):
        return UnitOfTemperature.CELSIUS

    @property
    def target_temperature(self):
        return self._target_temperature

    @property
    def target_temperature_step(self):
        return self._protocol.temperature_step

    @property
    def min_temp(self):
        return self._protocol.temperature_min

    @property
    def max_temp(self):
        return self._protocol.temperature_max

    @property
    def hvac_mode(self):
        return HVAC_MODE_MAPPING.get(self._hvac_mode, HVACMode.OFF)

    @property
    def hvac_modes(self):
        return [HVAC_MODE_MAPPING[mode] for mode in self._protocol.supported_hvac_modes]

    @property
    def fan_mode(self):
        return self._fan_mode

    @property
    def fan_modes(self):
        return self._protocol.supported_fan_modes

    @property
    def swing_mode(self):
        return self._swing_mode

    @property
    def swing_modes(self):
        return self._protocol.supported_swing_modes

    @property
    def preset_mode(self):
        return self._preset_mode

    @property
    def preset_modes(self):
        return self._protocol.supported_presets

    @property
    def supported_features(self):
        return (ClimateEntityFeature.TARGET_TEMPERATURE |
                ClimateEntityFeature.FAN_MODE |
                ClimateEntityFeature.SWING_MODE |
                ClimateEntityFeature.PRESET_MODE |
                ClimateEntityFeature.TURN_ON |
                ClimateEntityFeature.TURN_OFF)

    @property
    def device_info(self):
        """Return device information."""
        return DeviceInfo(
            identifiers={(DOMAIN, self._dev_id)},
            name=self._attr_name,
            manufacturer="Panasonic",
            model=f"IR Climate Controller ({self._climate_model.upper()})",
            sw_version=f"Protocol {self._protocol_version}",
        )

    async def async_set_temperature(self, **kwargs):
        """Set new target temperature."""
        if ATTR_TEMPERATURE in kwargs:
            self._target_temperature = kwargs[ATTR_TEMPERATURE]
            _LOGGER.debug("Setting temperature to %s", self._target_temperature)
            await self._send_climate_command()
        self.async_write_ha_state()

    async def async_set_hvac_mode(self, hvac_mode):
        """Set new target hvac mode - enum veya string kabul eder"""
        hvac_mode_str = _option_value(hvac_mode)
        _LOGGER.debug("Setting HVAC mode from %s to %s", self._hvac_mode, hvac_mode_str)
        self._hvac_mode = hvac_mode_str
        await self._send_climate_command()
        self.async_write_ha_state()

    async def async_turn_on(self):
        await self.async_set_hvac_mode("auto" if self._hvac_mode == "off" else self._hvac_mode)

    async def async_turn_off(self):
        await self.async_set_hvac_mode("off")

    async def async_set_fan_mode(self, fan_mode):
        """Set new target fan mode - enum veya string kabul eder"""
        self._fan_mode = _option_value(fan_mode)
        _LOGGER.debug("Setting fan mode to %s", self._fan_mode)
        await self._send_climate_command()
        self.async_write_ha_state()

    async def async_set_swing_mode(self, swing_mode):
        """Set new target swing operation - enum veya string kabul eder"""
        self._swing_mode = _option_value(swing_mode)
        _LOGGER.debug("Setting swing mode to %s", self._swing_mode)
        await self._send_climate_command()
        self.async_write_ha_state()

    async def async_set_preset_mode(self, preset_mode):
        """Set new preset (quiet / boost)."""
        self._preset_mode = _option_value(preset_mode)
        _LOGGER.debug("Setting preset mode to %s", self._preset_mode)
        await self._send_climate_command()
        self.async_write_ha_state()

    def _build_ir_command(self):
        """Pulse sequence for the current entity state."""
        return self._protocol.generate_ir_code(
            hvac_mode=self._hvac_mode,
            target_temp=self._target_temperature,
            fan_mode=self._fan_mode,
            swing_mode=self._swing_mode,
            preset_mode=self._preset_mode,
        )

    async def _send_climate_command(self):
        """Send climate command to device."""
        pulses = self._build_ir_command()
        await self._send_ir_command(pulses)
        # Komut başarılıysa available yap
        self._available = True

    async def async_update(self):
        """Update device state."""
        await self.hass.async_add_executor_job(self._update_availability)

    async def async_will_remove_from_hass(self):
        """Close connection when entity is removed."""
        self._deinit_device()
        await super().async_will_remove_from_hass()
