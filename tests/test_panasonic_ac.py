"""Panasonic IR Climate - test the Panasonic A/C state model."""

import pytest

from custom_components.panasonic_ir_climate.climate_protocols.panasonic import (
    decode_panasonic_ac,
    fix_checksum,
    valid_checksum,
)
from custom_components.panasonic_ir_climate.climate_protocols.panasonic_ac import (
    AC_AUTO,
    AC_COOL,
    AC_DRY,
    AC_FAN,
    AC_FAN_AUTO,
    AC_FAN_MODE_TEMP,
    AC_HEAT,
    AC_SWING_H_AUTO,
    AC_SWING_H_FULL_RIGHT,
    AC_SWING_H_LEFT,
    AC_SWING_H_MIDDLE,
    AC_SWING_V_AUTO,
    AC_SWING_V_DOWN,
    AC_SWING_V_UP,
    KNOWN_GOOD_STATE,
    PanasonicAc,
    PanasonicModel,
    apply_model,
    detect_model,
)

AC_STATE = bytes([
    0x02, 0x20, 0xE0, 0x04, 0x00, 0x00, 0x00, 0x06, 0x02,
    0x20, 0xE0, 0x04, 0x00, 0x4E, 0x2E, 0x80, 0xAF, 0x00,
    0x00, 0x0E, 0xE0, 0x11, 0x00, 0x01, 0x00, 0x06, 0xB7,
])

KNOWN_MODELS = [PanasonicModel.DKE, PanasonicModel.JKE, PanasonicModel.LKE, PanasonicModel.NKE]


def test_default_state() -> None:
    ac = PanasonicAc()

    assert ac.get_raw() == fix_checksum(KNOWN_GOOD_STATE)
    assert ac.get_model() == PanasonicModel.JKE
    assert not ac.get_power()
    assert ac.get_mode() == AC_AUTO


def test_set_raw() -> None:
    ac = PanasonicAc()
    ac.set_raw(AC_STATE)

    assert ac.get_model() == PanasonicModel.DKE
    assert not ac.get_power()
    assert ac.get_mode() == AC_HEAT
    assert ac.get_temp() == 23
    assert ac.get_fan() == AC_FAN_AUTO
    assert ac.get_swing_vertical() == AC_SWING_V_AUTO
    assert ac.get_quiet()
    assert not ac.get_powerful()
    assert ac.get_raw() == AC_STATE

    with pytest.raises(ValueError):
        ac.set_raw(AC_STATE[:10])


def test_state_reset() -> None:
    ac = PanasonicAc()
    ac.set_raw(AC_STATE)
    ac.state_reset()
    assert ac.get_raw() == fix_checksum(KNOWN_GOOD_STATE)


def test_power() -> None:
    ac = PanasonicAc()
    ac.set_mode(AC_COOL)

    ac.on()
    assert ac.get_power()
    assert ac.get_mode() == AC_COOL
    ac.off()
    assert not ac.get_power()
    assert ac.get_mode() == AC_COOL

    ac.set_power(True)
    assert ac.get_power()
    ac.set_power(False)
    assert not ac.get_power()


@pytest.mark.parametrize("celsius,expected", [(0, 16), (15, 16), (16, 16), (22, 22), (30, 30), (31, 30), (100, 30)])
def test_temperature_clamp(celsius, expected) -> None:
    ac = PanasonicAc()
    ac.set_temp(celsius)
    assert ac.get_temp() == expected


def test_fan_mode_temperature() -> None:
    ac = PanasonicAc()
    ac.set_mode(AC_COOL)
    ac.set_temp(21)

    ac.set_mode(AC_FAN)
    assert ac.get_mode() == AC_FAN
    assert ac.get_temp() == AC_FAN_MODE_TEMP

    ac.set_mode(AC_COOL)
    assert ac.get_mode() == AC_COOL
    assert ac.get_temp() == 21


def test_temperature_not_remembered() -> None:
    ac = PanasonicAc()
    ac.set_temp(18)
    ac.set_temp(29, remember=False)
    assert ac.get_temp() == 29

    ac.set_mode(AC_DRY)
    assert ac.get_temp() == 18


def test_unknown_mode_is_auto() -> None:
    ac = PanasonicAc()
    ac.set_mode(AC_HEAT)
    ac.set_temp(19)

    ac.set_mode(9)
    assert ac.get_mode() == AC_AUTO
    assert ac.get_temp() == 19


def test_fan_speed() -> None:
    ac = PanasonicAc()
    # Default state has no fan nibble; read back as an unsigned byte
    assert ac.get_fan() == 253

    ac.set_fan(2)
    assert ac.get_fan() == 2
    ac.set_fan(AC_FAN_AUTO)
    assert ac.get_fan() == AC_FAN_AUTO
    ac.set_fan(0)
    assert ac.get_fan() == 0

    ac.set_fan(5)
    assert ac.get_fan() == 0
    ac.set_fan(-1)
    assert ac.get_fan() == 0


def test_vertical_swing() -> None:
    ac = PanasonicAc()
    ac.set_fan(3)

    ac.set_swing_vertical(AC_SWING_V_AUTO)
    assert ac.get_swing_vertical() == AC_SWING_V_AUTO
    ac.set_swing_vertical(0)
    assert ac.get_swing_vertical() == AC_SWING_V_UP
    ac.set_swing_vertical(9)
    assert ac.get_swing_vertical() == AC_SWING_V_DOWN
    ac.set_swing_vertical(3)
    assert ac.get_swing_vertical() == 3

    assert ac.get_fan() == 3


def test_horizontal_swing_dke() -> None:
    ac = PanasonicAc()
    ac.set_model(PanasonicModel.DKE)
    assert ac.get_swing_horizontal() == AC_SWING_H_MIDDLE

    ac.set_swing_horizontal(AC_SWING_H_LEFT)
    assert ac.get_swing_horizontal() == AC_SWING_H_LEFT

    ac.set_swing_horizontal(0x42)
    assert ac.get_swing_horizontal() == AC_SWING_H_LEFT

    ac.set_swing_horizontal(AC_SWING_H_AUTO)
    assert ac.get_swing_horizontal() == AC_SWING_H_AUTO
    assert ac.get_model() == PanasonicModel.DKE


@pytest.mark.parametrize("model", [PanasonicModel.LKE, PanasonicModel.NKE])
def test_horizontal_swing_fixed_middle(model) -> None:
    ac = PanasonicAc()
    ac.set_model(model)

    ac.set_swing_horizontal(AC_SWING_H_FULL_RIGHT)
    assert ac.get_swing_horizontal() == AC_SWING_H_MIDDLE
    assert ac.get_model() == model


def test_horizontal_swing_remembered() -> None:
    ac = PanasonicAc()
    ac.set_model(PanasonicModel.JKE)

    ac.set_swing_horizontal(AC_SWING_H_LEFT)
    assert ac.get_swing_horizontal() == 0x00  # JKE has no horizontal swing

    ac.set_model(PanasonicModel.NKE)
    assert ac.get_swing_horizontal() == AC_SWING_H_MIDDLE

    ac.set_model(PanasonicModel.DKE)
    assert ac.get_swing_horizontal() == AC_SWING_H_LEFT


def test_quiet_powerful_exclusive() -> None:
    ac = PanasonicAc()

    ac.set_quiet(True)
    assert ac.get_quiet()
    assert not ac.get_powerful()

    ac.set_powerful(True)
    assert ac.get_powerful()
    assert not ac.get_quiet()

    ac.set_powerful(True)
    assert ac.get_powerful()
    assert not ac.get_quiet()

    ac.set_quiet(True)
    ac.set_quiet(True)
    assert ac.get_quiet()
    assert not ac.get_powerful()

    ac.set_quiet(False)
    assert not ac.get_quiet()
    assert not ac.get_powerful()


@pytest.mark.parametrize("model", KNOWN_MODELS)
def test_model_round_trip(model) -> None:
    ac = PanasonicAc()
    ac.set_model(model)
    assert ac.get_model() == model

    ac.on()
    ac.set_mode(AC_HEAT)
    ac.set_temp(20)
    assert ac.get_model() == model


def test_unknown_model_ignored() -> None:
    ac = PanasonicAc()
    ac.set_model(PanasonicModel.LKE)
    ac.set_model(PanasonicModel.UNKNOWN)
    assert ac.get_model() == PanasonicModel.LKE


def test_detect_model() -> None:
    assert detect_model(KNOWN_GOOD_STATE) == PanasonicModel.JKE
    assert detect_model(AC_STATE) == PanasonicModel.DKE

    unknown = bytearray(KNOWN_GOOD_STATE)
    unknown[17] = 0x0D
    unknown[23] = 0x00
    assert detect_model(bytes(unknown)) == PanasonicModel.UNKNOWN


def test_apply_model_is_pure() -> None:
    state = bytes(KNOWN_GOOD_STATE)

    dke = apply_model(state, PanasonicModel.DKE, AC_SWING_H_LEFT)

    assert state == KNOWN_GOOD_STATE
    assert detect_model(dke) == PanasonicModel.DKE
    assert dke[17] == AC_SWING_H_LEFT
    assert apply_model(state, PanasonicModel.UNKNOWN) == state


def test_checksum_after_mutations() -> None:
    ac = PanasonicAc()
    for model in KNOWN_MODELS:
        ac.set_model(model)
        ac.on()
        ac.set_mode(AC_FAN)
        ac.set_fan(4)
        ac.set_swing_vertical(2)
        ac.set_swing_horizontal(AC_SWING_H_AUTO)
        ac.set_powerful(True)
        assert valid_checksum(ac.get_raw())


def test_send() -> None:
    ac = PanasonicAc()
    ac.set_model(PanasonicModel.DKE)
    ac.on()
    ac.set_mode(AC_COOL)
    ac.set_temp(24)

    result = decode_panasonic_ac(ac.send())

    assert result is not None
    assert result.state == ac.get_raw()


def test_to_string() -> None:
    ac = PanasonicAc()
    ac.set_raw(AC_STATE)
    text = str(ac)

    assert text.startswith("Model: 3 (DKE), Power: Off, Mode: 4 (HEAT), Temp: 23C")
    assert "Swing (Horizontal)" in text
    assert text.endswith("Quiet: On, Powerful: Off")

    ac.set_model(PanasonicModel.JKE)
    assert "Swing (Horizontal)" not in str(ac)
