"""
Labels, label providers, and the writers that label a search's states.
"""

from .label import Label, LabelRegistry
from .provider import StateLabelProvider, TransitionLabelProvider, get_configured_list
from .colors import color_of, PALETTE_SIZE
from .listener import StateLabelListener
from .text import StateLabelText
from .dot import StateLabelDot

__all__ = [
    "Label",
    "LabelRegistry",
    "StateLabelProvider",
    "TransitionLabelProvider",
    "get_configured_list",
    "color_of",
    "PALETTE_SIZE",
    "StateLabelListener",
    "StateLabelText",
    "StateLabelDot",
]
