"""Daily weather event flags packed into a single integer."""

from __future__ import annotations

from typing import NamedTuple

EVENT_BITS = 6
EVENT_MASK = (1 << EVENT_BITS) - 1


class EventFlags(NamedTuple):
    """Occurrence flags in bit order, least significant first."""

    freeze: bool = False
    rain: bool = False
    snow: bool = False
    hail: bool = False
    storm: bool = False
    tornado: bool = False


class EventBitmask:
    """Pure conversion between the packed code and :class:`EventFlags`."""

    @staticmethod
    def decode(code: int) -> EventFlags:
        # bits above the sixth are ignored
        masked = code & EVENT_MASK
        return EventFlags(*((masked >> bit) & 1 == 1 for bit in range(EVENT_BITS)))

    @staticmethod
    def encode(flags: EventFlags) -> int:
        code = 0
        for bit, flag in enumerate(flags):
            if flag:
                code |= 1 << bit
        return code
