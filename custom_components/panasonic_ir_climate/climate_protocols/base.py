"""Base climate protocol."""
from abc import ABC, abstractmethod


class ClimateIRProtocol(ABC):
    """Base class for all climate IR protocols."""

    def __init__(self):
        self.supported_hvac_modes = [
            "off", "cool", "heat", "dry", "fan_only"
        ]
        self.supported_fan_modes = [
            "auto", "low", "medium", "high"
        ]
        self.supported_swing_modes = [
            "off", "vertical"
        ]
        self.supported_presets = ["none"]

    @abstractmethod
    def generate_ir_code(self, hvac_mode, target_temp, fan_mode, swing_mode,
                         preset_mode=None):
        """Generate IR pulse sequence for climate command."""

    def decode_ir_code(self, code):
        """Turn a captured IR code back into climate settings."""
        raise NotImplementedError(f"{type(self).__name__} can't decode IR codes")

    @property
    def temperature_min(self):
        return getattr(self, 'TEMP_MIN', 16)

    @property
    def temperature_max(self):
        return getattr(self, 'TEMP_MAX', 30)

    @property
    def temperature_step(self):
        return getattr(self, 'TEMP_STEP', 1)
