"""
Label colors for Graphviz output.

The first PALETTE_SIZE labels use the slots of Graphviz's "set312" color
scheme. Later labels get an RGB color from three phase-shifted sine waves
(red, green, blue), which spreads consecutive indices around the color wheel.
"""

import math

PALETTE_SIZE = 12
COLOR_SCHEME = "set312"

_FREQUENCY = 2.4
_PHASES = (0, 2, 4)


def _channel(i: int, phase: int) -> str:
    value = round(math.sin(_FREQUENCY * i + phase) * 127 + 128)
    return f"{min(255, max(0, value)):02x}"


def color_of(index: int) -> str:
    """Graphviz color of the label with the given registry index."""
    if index < PALETTE_SIZE:
        return str(index + 1)
    i = index - PALETTE_SIZE
    return "#" + "".join(_channel(i, phase) for phase in _PHASES)
