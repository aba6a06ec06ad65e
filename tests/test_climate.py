"""Panasonic IR Climate - test the climate entity without a running Home Assistant."""

import pytest

pytest.importorskip("homeassistant")

from homeassistant.components.climate import HVACMode  # noqa: E402

from custom_components.panasonic_ir_climate.climate import (  # noqa: E402
    PanasonicIRClimate,
    _option_value,
    clip_pulses,
)
from custom_components.panasonic_ir_climate.climate_protocols.panasonic import (  # noqa: E402
    decode_panasonic_ac,
)
from custom_components.panasonic_ir_climate.climate_protocols.panasonic_ac import (  # noqa: E402
    PanasonicAc,
)


def _entity(model="dke", version="Auto"):
    return PanasonicIRClimate(
        hass=None,
        name="Living room",
        dev_id="bf1234567890abcdef",
        address="192.168.1.20",
        local_key="0123456789abcdef",
        protocol_version=version,
        climate_model=model,
    )


def test_clip_pulses() -> None:
    assert clip_pulses([432, 100000, 65535, 1296.4]) == [432, 65535, 65535, 1296]


def test_option_value() -> None:
    assert _option_value(HVACMode.COOL) == "cool"
    assert _option_value("boost") == "boost"


def test_entity_defaults() -> None:
    entity = _entity()

    assert entity.unique_id == "panasonic_ir_climate_bf1234567890abcdef"
    assert entity.name == "Living room"
    assert entity.hvac_mode == HVACMode.OFF
    assert HVACMode.FAN_ONLY in entity.hvac_modes
    assert entity.min_temp == 16
    assert entity.max_temp == 30
    assert entity.swing_modes == ["off", "vertical", "horizontal", "both"]
    assert entity.preset_modes == ["none", "quiet", "boost"]
    assert entity._protocol_version == 3.3
    assert not entity.available


def test_entity_model_options() -> None:
    entity = _entity(model="jke", version="3.4")

    assert entity.swing_modes == ["off", "vertical"]
    assert entity._protocol_version == 3.4


def test_build_ir_command() -> None:
    entity = _entity()
    entity._hvac_mode = "heat"
    entity._target_temperature = 26
    entity._fan_mode = "low"
    entity._swing_mode = "vertical"
    entity._preset_mode = "quiet"

    result = decode_panasonic_ac(clip_pulses(entity._build_ir_command()))

    assert result is not None
    ac = PanasonicAc()
    ac.set_raw(result.state)
    assert ac.get_power()
    assert ac.get_temp() == 26
    assert ac.get_fan() == 1
    assert ac.get_quiet()
