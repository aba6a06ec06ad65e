# pulse.py
"""Generic mark/space pulse helpers shared by the IR protocols."""
import logging
from collections import namedtuple

_LOGGER = logging.getLogger(__name__)

# Matching defaults (percent / microseconds)
TOLERANCE = 25
MARK_EXCESS = 50
# Longest gap a capture can report before the receiver times out
RECEIVE_TIMEOUT = 15000

MatchResult = namedtuple("MatchResult", ["success", "data", "used"])


def ticks_low(usecs, tolerance=TOLERANCE, delta=0):
    """Lowest duration still accepted as `usecs`."""
    return max(usecs * (1.0 - tolerance / 100.0) - delta, 0)


def ticks_high(usecs, tolerance=TOLERANCE, delta=0):
    """Highest duration still accepted as `usecs`."""
    return usecs * (1.0 + tolerance / 100.0) + 1 + delta


def match(measured, desired, tolerance=TOLERANCE, delta=0):
    """Check a measured duration against the desired one."""
    return (ticks_low(desired, tolerance, delta) <= measured
            <= ticks_high(desired, tolerance, delta))


def match_at_least(measured, desired, tolerance=TOLERANCE, delta=0):
    """Check a measured duration is at least (roughly) the desired one."""
    # A zero entry only shows up as the end of a capture: treat it as infinite.
    if measured == 0:
        return True
    return measured >= ticks_low(min(desired, RECEIVE_TIMEOUT), tolerance, delta)


def match_mark(measured, desired, tolerance=TOLERANCE, excess=MARK_EXCESS):
    """Marks are stretched by the receiver, so compare against a longer mark."""
    return match(measured, desired + excess, tolerance)


def match_space(measured, desired, tolerance=TOLERANCE, excess=MARK_EXCESS):
    """Spaces are shortened by the receiver, so compare against a shorter space."""
    return match(measured, desired - excess, tolerance)


def reverse_bits(value, nbits):
    """Reverse the lowest `nbits` bits of value."""
    result = 0
    for _ in range(nbits):
        result = (result << 1) | (value & 1)
        value >>= 1
    return result


def match_data(pulses, offset, nbits, one_mark, one_space, zero_mark,
               zero_space, tolerance=TOLERANCE, excess=MARK_EXCESS,
               msb_first=True):
    """
    Extract `nbits` bits starting at pulses[offset].

    Handles both space encoded (one_mark == zero_mark) and mark encoded
    (one_space == zero_space) data. Returns a MatchResult with the number
    of pulses consumed.
    """
    data = 0
    used = 0
    if offset + nbits * 2 > len(pulses):
        return MatchResult(False, data, used)

    if one_mark == zero_mark:
        for _ in range(nbits):
            if not match_mark(pulses[offset + used], one_mark, tolerance, excess):
                return MatchResult(False, data, used)
            space = pulses[offset + used + 1]
            if match_space(space, one_space, tolerance, excess):
                data = (data << 1) | 1
            elif match_space(space, zero_space, tolerance, excess):
                data <<= 1
            else:
                return MatchResult(False, data, used)
            used += 2
    elif one_space == zero_space:
        for _ in range(nbits):
            mark = pulses[offset + used]
            if match_mark(mark, one_mark, tolerance, excess):
                data = (data << 1) | 1
            elif match_mark(mark, zero_mark, tolerance, excess):
                data <<= 1
            else:
                return MatchResult(False, data, used)
            if not match_space(pulses[offset + used + 1], one_space, tolerance, excess):
                return MatchResult(False, data, used)
            used += 2
    else:
        _LOGGER.debug("Neither marks nor spaces are constant, can't match data")
        return MatchResult(False, data, used)

    if not msb_first:
        data = reverse_bits(data, nbits)
    return MatchResult(True, data, used)


def send_data(one_mark, one_space, zero_mark, zero_space, data, nbits,
              msb_first=True):
    """Convert the lowest `nbits` bits of data into mark/space pairs."""
    pulses = []
    if msb_first:
        positions = range(nbits - 1, -1, -1)
    else:
        positions = range(nbits)
    for bit_position in positions:
        if (data >> bit_position) & 1:
            pulses.extend([one_mark, one_space])
        else:
            pulses.extend([zero_mark, zero_space])
    return pulses


def send_generic(header_mark, header_space, one_mark, one_space, zero_mark,
                 zero_space, footer_mark, gap, data, nbits=None,
                 message_time=0, msb_first=True, repeat=0):
    """
    Build a complete framed pulse train.

    `data` is either an integer of `nbits` bits or a sequence of bytes, the
    latter sent byte by byte. The trailing gap is stretched so each frame
    lasts at least `message_time` microseconds. The frame is emitted
    1 + repeat times.
    """
    if isinstance(data, int):
        body = send_data(one_mark, one_space, zero_mark, zero_space,
                         data, nbits, msb_first)
    else:
        body = []
        for byte in data:
            body.extend(send_data(one_mark, one_space, zero_mark, zero_space,
                                  byte, 8, msb_first))

    frame = []
    if header_mark:
        frame.append(header_mark)
    if header_space:
        frame.append(header_space)
    frame.extend(body)
    if footer_mark:
        frame.append(footer_mark)
    elapsed = sum(frame)
    if elapsed >= message_time:
        frame.append(gap)
    else:
        frame.append(max(gap, message_time - elapsed))

    pulses = []
    for _ in range(repeat + 1):
        pulses.extend(frame)
    return pulses
