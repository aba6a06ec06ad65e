# panasonic.py
"""Panasonic IR signal codec (Panasonic64 commands and A/C state frames)."""
import logging
from dataclasses import dataclass

from .pulse import (
    match,
    match_at_least,
    match_data,
    match_mark,
    match_space,
    send_generic,
)

_LOGGER = logging.getLogger(__name__)

# IR timing parameters (ticks / microseconds)
PANASONIC_TICK = 432
PANASONIC_HDR_MARK_TICKS = 8
PANASONIC_HDR_MARK = PANASONIC_HDR_MARK_TICKS * PANASONIC_TICK
PANASONIC_HDR_SPACE_TICKS = 4
PANASONIC_HDR_SPACE = PANASONIC_HDR_SPACE_TICKS * PANASONIC_TICK
PANASONIC_BIT_MARK_TICKS = 1
PANASONIC_BIT_MARK = PANASONIC_BIT_MARK_TICKS * PANASONIC_TICK
PANASONIC_ONE_SPACE_TICKS = 3
PANASONIC_ONE_SPACE = PANASONIC_ONE_SPACE_TICKS * PANASONIC_TICK
PANASONIC_ZERO_SPACE_TICKS = 1
PANASONIC_ZERO_SPACE = PANASONIC_ZERO_SPACE_TICKS * PANASONIC_TICK
PANASONIC_FREQUENCY = 36700
PANASONIC_DUTY_CYCLE = 50

# Panasonic64 commands
PANASONIC_BITS = 48
PANASONIC_MANUFACTURER = 0x4004
PANASONIC_MIN_COMMAND_LENGTH_TICKS = 378
PANASONIC_MIN_COMMAND_LENGTH = PANASONIC_MIN_COMMAND_LENGTH_TICKS * PANASONIC_TICK
PANASONIC_END_GAP = 5000
PANASONIC_MIN_GAP_TICKS = PANASONIC_MIN_COMMAND_LENGTH_TICKS - (
    PANASONIC_HDR_MARK_TICKS + PANASONIC_HDR_SPACE_TICKS
    + PANASONIC_BITS * (PANASONIC_BIT_MARK_TICKS + PANASONIC_ONE_SPACE_TICKS)
    + PANASONIC_BIT_MARK_TICKS)
PANASONIC_MIN_GAP = PANASONIC_MIN_GAP_TICKS * PANASONIC_TICK

# A/C state frames
PANASONIC_AC_STATE_LENGTH = 27
PANASONIC_AC_BITS = PANASONIC_AC_STATE_LENGTH * 8
PANASONIC_AC_SECTION1_LENGTH = 8
PANASONIC_AC_SECTION_GAP = 10000
PANASONIC_AC_MESSAGE_GAP = 100000
PANASONIC_AC_CHECKSUM_INIT = 0xF4
PANASONIC_AC_TOLERANCE = 40
PANASONIC_AC_EXCESS = 0
PANASONIC_AC_SIGNATURE = (0x02, 0x20)

HEADER = 2
FOOTER = 2


@dataclass(frozen=True)
class TickProfile:
    """Per message tick lengths, recovered from the observed header."""

    mark_tick: float
    space_tick: float

    @classmethod
    def from_header(cls, header_mark, header_space):
        return cls(header_mark / PANASONIC_HDR_MARK_TICKS,
                   header_space / PANASONIC_HDR_SPACE_TICKS)

    @property
    def bit_mark(self):
        return PANASONIC_BIT_MARK_TICKS * self.mark_tick

    @property
    def one_space(self):
        return PANASONIC_ONE_SPACE_TICKS * self.space_tick

    @property
    def zero_space(self):
        return PANASONIC_ZERO_SPACE_TICKS * self.space_tick

    @property
    def header_mark(self):
        return PANASONIC_HDR_MARK_TICKS * self.mark_tick

    @property
    def header_space(self):
        return PANASONIC_HDR_SPACE_TICKS * self.space_tick


@dataclass(frozen=True)
class PanasonicCommand:
    """A Panasonic64 command: manufacturer, device, subdevice & function."""

    manufacturer: int
    device: int
    subdevice: int
    function: int

    @property
    def checksum(self):
        return (self.device ^ self.subdevice ^ self.function) & 0xFF

    @property
    def value(self):
        return encode_panasonic(self.manufacturer, self.device,
                                self.subdevice, self.function)

    @classmethod
    def from_value(cls, value):
        return cls(manufacturer=(value >> 32) & 0xFFFF,
                   device=(value >> 24) & 0xFF,
                   subdevice=(value >> 16) & 0xFF,
                   function=(value >> 8) & 0xFF)


@dataclass(frozen=True)
class DecodeResult:
    protocol: str
    bits: int
    value: int = 0
    address: int = 0
    command: int = 0
    state: bytes = b""


def encode_panasonic(manufacturer, device, subdevice, function):
    """Pack the command fields into a raw Panasonic64 value."""
    checksum = (device ^ subdevice ^ function) & 0xFF
    return (((manufacturer & 0xFFFF) << 32) | ((device & 0xFF) << 24)
            | ((subdevice & 0xFF) << 16) | ((function & 0xFF) << 8) | checksum)


def send_panasonic64(data, nbits=PANASONIC_BITS, repeat=0):
    """Convert a raw Panasonic64 value into a pulse sequence."""
    return send_generic(
        PANASONIC_HDR_MARK, PANASONIC_HDR_SPACE,
        PANASONIC_BIT_MARK, PANASONIC_ONE_SPACE,
        PANASONIC_BIT_MARK, PANASONIC_ZERO_SPACE,
        PANASONIC_BIT_MARK, PANASONIC_MIN_GAP,
        data, nbits,
        message_time=PANASONIC_MIN_COMMAND_LENGTH,
        msb_first=True, repeat=repeat)


def send_panasonic(address, data, nbits=PANASONIC_BITS, repeat=0):
    """Send a manufacturer code and a 32 bit data portion."""
    return send_panasonic64(((address & 0xFFFF) << 32) | (data & 0xFFFFFFFF),
                            nbits, repeat)


def decode_panasonic(pulses, nbits=PANASONIC_BITS, strict=True,
                     manufacturer=PANASONIC_MANUFACTURER):
    """
    Decode a Panasonic64 command.

    Returns a DecodeResult, or None when the pulses are not a (compliant)
    Panasonic message.
    """
    if len(pulses) < 2 * nbits + HEADER + FOOTER - 1:
        _LOGGER.debug("Panasonic: too few pulses (%d) for %d bits", len(pulses), nbits)
        return None
    if strict and nbits != PANASONIC_BITS:
        _LOGGER.debug("Panasonic: %d bits is not the standard length", nbits)
        return None

    offset = 0
    # Header
    if not match_mark(pulses[offset], PANASONIC_HDR_MARK):
        return None
    if not match_space(pulses[offset + 1], PANASONIC_HDR_SPACE):
        return None
    ticks = TickProfile.from_header(pulses[offset], pulses[offset + 1])
    offset += HEADER

    # Data
    result = match_data(pulses, offset, nbits,
                        ticks.bit_mark, ticks.one_space,
                        ticks.bit_mark, ticks.zero_space)
    if not result.success:
        _LOGGER.debug("Panasonic: data mismatch at pulse %d", offset + result.used)
        return None
    data = result.data
    offset += result.used

    # Footer
    if offset >= len(pulses) or not match(pulses[offset], ticks.bit_mark):
        return None
    offset += 1
    if offset < len(pulses) and not match_at_least(pulses[offset], PANASONIC_END_GAP):
        _LOGGER.debug("Panasonic: trailing gap too short (%s)", pulses[offset])
        return None

    # Compliance
    address = data >> 32
    command = data & 0xFFFFFFFF
    if strict:
        if address != manufacturer:
            _LOGGER.debug("Panasonic: manufacturer 0x%04X != 0x%04X", address, manufacturer)
            return None
        checksum = ((data >> 24) ^ (data >> 16) ^ (data >> 8)) & 0xFF
        if data & 0xFF != checksum:
            _LOGGER.debug("Panasonic: bad checksum 0x%02X", data & 0xFF)
            return None

    return DecodeResult(protocol="PANASONIC", bits=nbits, value=data,
                        address=address, command=command)


def calc_checksum(state, length=None):
    """Sum of all bytes but the last, seeded with the checksum init."""
    if length is None:
        length = len(state)
    return (sum(state[:length - 1]) + PANASONIC_AC_CHECKSUM_INIT) & 0xFF


def valid_checksum(state, length=None):
    if length is None:
        length = len(state)
    if length < 2:
        return False
    return state[length - 1] == calc_checksum(state, length)


def fix_checksum(state, length=None):
    """Return a copy of state with a correct trailing checksum byte."""
    if length is None:
        length = len(state)
    fixed = bytearray(state)
    fixed[length - 1] = calc_checksum(fixed, length)
    return bytes(fixed)


def send_panasonic_ac(state, repeat=0):
    """Convert an A/C state into the two section pulse sequence."""
    if len(state) < PANASONIC_AC_STATE_LENGTH:
        _LOGGER.debug("Panasonic A/C: state too short (%d bytes), nothing sent", len(state))
        return []

    pulses = []
    for _ in range(repeat + 1):
        # Section 1
        pulses.extend(send_generic(
            PANASONIC_HDR_MARK, PANASONIC_HDR_SPACE,
            PANASONIC_BIT_MARK, PANASONIC_ONE_SPACE,
            PANASONIC_BIT_MARK, PANASONIC_ZERO_SPACE,
            PANASONIC_BIT_MARK, PANASONIC_AC_SECTION_GAP,
            state[:PANASONIC_AC_SECTION1_LENGTH], msb_first=False))
        # Section 2 (the rest of the state)
        pulses.extend(send_generic(
            PANASONIC_HDR_MARK, PANASONIC_HDR_SPACE,
            PANASONIC_BIT_MARK, PANASONIC_ONE_SPACE,
            PANASONIC_BIT_MARK, PANASONIC_ZERO_SPACE,
            PANASONIC_BIT_MARK, PANASONIC_AC_MESSAGE_GAP,
            state[PANASONIC_AC_SECTION1_LENGTH:], msb_first=False))
    return pulses


def _match_ac_byte(pulses, offset, ticks):
    return match_data(pulses, offset, 8,
                      ticks.bit_mark, ticks.one_space,
                      ticks.bit_mark, ticks.zero_space,
                      PANASONIC_AC_TOLERANCE, PANASONIC_AC_EXCESS,
                      msb_first=False)


def decode_panasonic_ac(pulses, nbits=PANASONIC_AC_BITS, strict=True):
    """
    Decode a Panasonic A/C message.

    Returns a DecodeResult holding the state bytes, or None if any part of
    the frame doesn't match.
    """
    if nbits % 8 != 0:
        _LOGGER.debug("Panasonic A/C: %d bits isn't a whole number of bytes", nbits)
        return None
    if strict and nbits != PANASONIC_AC_BITS:
        _LOGGER.debug("Panasonic A/C: %d bits is not the standard length", nbits)
        return None
    if len(pulses) < 2 * nbits + HEADER + FOOTER - 1:
        _LOGGER.debug("Panasonic A/C: too few pulses (%d) for %d bits", len(pulses), nbits)
        return None

    nbytes = nbits // 8
    state = []
    offset = 0

    # Header
    if not match_mark(pulses[offset], PANASONIC_HDR_MARK,
                      PANASONIC_AC_TOLERANCE, PANASONIC_AC_EXCESS):
        return None
    if not match_space(pulses[offset + 1], PANASONIC_HDR_SPACE,
                       PANASONIC_AC_TOLERANCE, PANASONIC_AC_EXCESS):
        return None
    ticks = TickProfile.from_header(pulses[offset], pulses[offset + 1])
    offset += HEADER

    # Section 1
    while (offset + 16 <= len(pulses) and len(state) < PANASONIC_AC_SECTION1_LENGTH
           and len(state) < nbytes):
        result = _match_ac_byte(pulses, offset, ticks)
        if not result.success:
            _LOGGER.debug("Panasonic A/C: section 1 mismatch at pulse %d", offset + result.used)
            return None
        state.append(result.data)
        offset += result.used

    # Section footer, then the second header
    expected = (
        (match_mark, ticks.bit_mark),
        (match_space, PANASONIC_AC_SECTION_GAP),
        (match_mark, ticks.header_mark),
        (match_space, ticks.header_space),
    )
    for matcher, duration in expected:
        if offset >= len(pulses) or not matcher(pulses[offset], duration,
                                                PANASONIC_AC_TOLERANCE,
                                                PANASONIC_AC_EXCESS):
            _LOGGER.debug("Panasonic A/C: section boundary mismatch at pulse %d", offset)
            return None
        offset += 1

    # Section 2
    while offset + 16 <= len(pulses) and len(state) < nbytes:
        result = _match_ac_byte(pulses, offset, ticks)
        if not result.success:
            _LOGGER.debug("Panasonic A/C: section 2 mismatch at pulse %d", offset + result.used)
            return None
        state.append(result.data)
        offset += result.used

    # Message footer
    if offset >= len(pulses) or not match_mark(pulses[offset], ticks.bit_mark,
                                               PANASONIC_AC_TOLERANCE,
                                               PANASONIC_AC_EXCESS):
        return None
    offset += 1
    if offset < len(pulses) and not match_at_least(pulses[offset],
                                                   PANASONIC_AC_MESSAGE_GAP):
        _LOGGER.debug("Panasonic A/C: message gap too short (%s)", pulses[offset])
        return None
    if len(state) != nbytes:
        _LOGGER.debug("Panasonic A/C: got %d of %d bytes", len(state), nbytes)
        return None

    state = bytes(state)
    # Compliance
    if strict:
        signature = bytes(PANASONIC_AC_SIGNATURE)
        if (state[:2] != signature
                or state[PANASONIC_AC_SECTION1_LENGTH:PANASONIC_AC_SECTION1_LENGTH + 2] != signature):
            _LOGGER.debug("Panasonic A/C: bad section signature")
            return None
        if not valid_checksum(state):
            _LOGGER.debug("Panasonic A/C: bad checksum 0x%02X", state[-1])
            return None

    return DecodeResult(protocol="PANASONIC_AC", bits=nbits, state=state)
