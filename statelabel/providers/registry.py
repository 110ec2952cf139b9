"""
Registry of label providers.

Maps the provider names accepted in ``label.class`` to their constructors.
"""

import logging
from typing import Callable

from ..config import LabelConfig
from ..exceptions import ConfigurationError
from ..labels.provider import StateLabelProvider
from .basic import AllDifferent, End, Initial
from .fields import BooleanStaticField, IntegerStaticField
from .methods import (
    InvokedMethod, ReturnedBooleanMethod, ReturnedIntegerMethod,
    ReturnedVoidMethod, SynchronizedMethod,
)
from .thrown import ThrownException
from .variables import BooleanLocalVariable, PositiveIntegerLocalVariable

logger = logging.getLogger(__name__)


# Registry: provider name -> constructor(config)
PROVIDER_FACTORIES: dict[str, Callable[[LabelConfig], StateLabelProvider]] = {
    # State providers
    "Initial": Initial,
    "End": End,
    "AllDifferent": AllDifferent,

    # Fields and variables
    "BooleanStaticField": BooleanStaticField,
    "IntegerStaticField": IntegerStaticField,
    "BooleanLocalVariable": BooleanLocalVariable,
    "PositiveIntegerLocalVariable": PositiveIntegerLocalVariable,

    # Calls, returns and raises
    "InvokedMethod": InvokedMethod,
    "ReturnedVoidMethod": ReturnedVoidMethod,
    "ReturnedBooleanMethod": ReturnedBooleanMethod,
    "ReturnedIntegerMethod": ReturnedIntegerMethod,
    "SynchronizedMethod": SynchronizedMethod,
    "ThrownException": ThrownException,
}


def get_factory(name: str) -> Callable[[LabelConfig], StateLabelProvider]:
    """
    Look up a provider by name. Qualified names (label.Initial) resolve by
    their last component.
    """
    factory = PROVIDER_FACTORIES.get(name) or PROVIDER_FACTORIES.get(name.rsplit(".", 1)[-1])
    if factory is None:
        raise ConfigurationError(f"Unknown label provider: {name}")
    return factory


def create_providers(config: LabelConfig) -> list[StateLabelProvider]:
    """
    Instantiate the providers listed under ``label.class``, in order.

    A provider that cannot be created is logged and left out.
    """
    providers = []
    for name in config.provider_names:
        try:
            provider = get_factory(name)(config)
        except ConfigurationError as e:
            logger.error(f"[LABEL] Provider {name} could not be instantiated: {e}")
            continue
        logger.debug(f"[LABEL] Registered provider {name}")
        providers.append(provider)
    return providers
