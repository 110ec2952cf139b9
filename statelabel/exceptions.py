"""
Exceptions raised by the labeling toolchain.
"""


class StateLabelError(Exception):
    """Base class for statelabel errors."""


class ConfigurationError(StateLabelError):
    """
    A label configuration cannot be used.

    Raised for unreadable or malformed configuration files, unknown provider
    names, and target signatures a provider cannot parse.
    """
