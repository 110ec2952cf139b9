"""
Label providers for fields, variables, calls, returns and raised exceptions.
"""

from .basic import Initial, End, AllDifferent
from .fields import BooleanStaticField, IntegerStaticField
from .variables import BooleanLocalVariable, PositiveIntegerLocalVariable
from .methods import (
    InvokedMethod,
    ReturnedVoidMethod,
    ReturnedBooleanMethod,
    ReturnedIntegerMethod,
    SynchronizedMethod,
)
from .thrown import ThrownException
from .registry import PROVIDER_FACTORIES, create_providers, get_factory

__all__ = [
    "Initial",
    "End",
    "AllDifferent",
    "BooleanStaticField",
    "IntegerStaticField",
    "BooleanLocalVariable",
    "PositiveIntegerLocalVariable",
    "InvokedMethod",
    "ReturnedVoidMethod",
    "ReturnedBooleanMethod",
    "ReturnedIntegerMethod",
    "SynchronizedMethod",
    "ThrownException",
    "PROVIDER_FACTORIES",
    "create_providers",
    "get_factory",
]
