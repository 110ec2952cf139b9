"""
Providers that label the calls and returns of functions.

Functions are matched by qualified name (``module.qualname``, wildcards
allowed). A call is seen at the first instruction of the callee's frame, a
return at the return instruction once it completed.
"""

from typing import Any, ClassVar, Optional

from ..config import LabelConfig
from ..labels.label import Label
from ..labels.provider import TransitionLabelProvider, get_configured_list
from .signatures import FunctionSpec, mangle


class FunctionProvider(TransitionLabelProvider):
    config_key: ClassVar[str]

    def __init__(self, config: LabelConfig):
        self.functions = [FunctionSpec.parse(s) for s in get_configured_list(config, self.config_key)]

    def matching(self, function: str) -> Optional[FunctionSpec]:
        for spec in self.functions:
            if spec.matches(function):
                return spec
        return None

    def returned(self, executed) -> Optional[tuple[FunctionSpec, Any]]:
        """(spec, value) if executed is a completed return from a watched function."""
        if not (executed.is_return and executed.returned):
            return None
        spec = self.matching(executed.function)
        if spec is None:
            return None
        return spec, executed.return_value


class InvokedMethod(FunctionProvider):
    """Cuts the transition right before a watched function starts."""

    config_key = "label.InvokedMethod.method"

    def break_before(self, next_instruction):
        if not next_instruction.is_entry:
            return None
        spec = self.matching(next_instruction.function)
        if spec is None:
            return None
        signature = mangle(next_instruction.function)
        return {Label(f"invoked__{signature}", f"{spec.pattern} is invoked")}


class ReturnedVoidMethod(FunctionProvider):
    config_key = "label.ReturnedVoidMethod.method"

    def break_after(self, executed):
        found = self.returned(executed)
        if found is None or found[1] is not None:
            return None
        spec, _ = found
        return {Label(f"returned__{mangle(executed.function)}", f"{spec.pattern} returned")}


class ReturnedBooleanMethod(FunctionProvider):
    config_key = "label.ReturnedBooleanMethod.method"

    def break_after(self, executed):
        found = self.returned(executed)
        if found is None or not isinstance(found[1], bool):
            return None
        spec, value = found
        return {
            Label(
                f"{str(value).lower()}__{mangle(executed.function)}",
                f"{spec.pattern} returned {value}",
            )
        }


class ReturnedIntegerMethod(FunctionProvider):
    config_key = "label.ReturnedIntegerMethod.method"

    def break_after(self, executed):
        found = self.returned(executed)
        if found is None:
            return None
        spec, value = found
        if not isinstance(value, int) or isinstance(value, bool):
            return None
        magnitude = f"minus{abs(value)}" if value < 0 else str(value)
        return {Label(f"{magnitude}__{mangle(executed.function)}", f"{spec.pattern} returned {value}")}


class SynchronizedMethod(FunctionProvider):
    """
    Marks functions that run while holding a lock.

    The lock is not observed; the configuration names the functions that take
    it. 'locked' is placed before the first instruction, 'unlocked' after the
    return.
    """

    config_key = "label.SynchronizedMethod.method"

    def break_before(self, next_instruction):
        if not next_instruction.is_entry:
            return None
        spec = self.matching(next_instruction.function)
        if spec is None:
            return None
        return {Label(f"locked__{mangle(next_instruction.function)}", f"{spec.pattern} locked")}

    def break_after(self, executed):
        found = self.returned(executed)
        if found is None:
            return None
        spec, _ = found
        return {Label(f"unlocked__{mangle(executed.function)}", f"{spec.pattern} unlocked")}
