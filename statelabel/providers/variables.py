"""
Providers that label states by the value of local variables.

A watched variable is named ``module.qualname:var``. The transition is cut
after a store that changes what the label says about the variable, and after
the variable leaves scope (its function returns, or it is deleted).

When a variable leaves scope the value it had just before is retained, so the
state reached by the scope-ending instruction is still labeled with it. The
retained value is used by at most one state.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from ..config import LabelConfig
from ..labels.label import Label
from ..labels.provider import TransitionLabelProvider, get_configured_list
from .signatures import MISSING, VariableSpec, mangle


@dataclass
class _Retained:
    function: str  # qualified name of the function the variable lived in
    value: Any


class LocalVariableProvider(TransitionLabelProvider):
    """Shared scope tracking; subclasses interpret and label the values."""

    config_key: ClassVar[str]

    def __init__(self, config: LabelConfig):
        self.variables = [VariableSpec.parse(s) for s in get_configured_list(config, self.config_key)]
        self._before: dict[str, Any] = {}
        self._retained: dict[str, _Retained] = {}

    def interpret(self, value: Any) -> Any:
        """What the label says about a value; None if it says nothing."""
        raise NotImplementedError

    def label(self, spec: VariableSpec, function: str, value: Any) -> Optional[Label]:
        raise NotImplementedError

    def _lookup(self, spec: VariableSpec, frame) -> Optional[tuple[str, Any]]:
        retained = self._retained.pop(spec.signature, None)
        found = spec.find(frame)
        if found is None and retained is not None:
            found = (retained.function, retained.value)
        return found

    def get_state_labels(self, search):
        labels = set()
        for spec in self.variables:
            found = self._lookup(spec, search.top_frame)
            if found is None:
                continue
            function, value = found
            label = self.label(spec, function, value)
            if label is not None:
                labels.add(label)
        return labels

    def before_instruction(self, instruction):
        self._before = {}
        self._retained = {}
        for spec in self.variables:
            if not spec.function.matches(instruction.function):
                continue
            if (spec.name in instruction.stored_names
                    or spec.name in instruction.deleted_names
                    or instruction.is_return):
                self._before[spec.signature] = instruction.frame.f_locals.get(spec.name, MISSING)

    def break_after(self, executed):
        should_break = False
        for spec in self.variables:
            if spec.signature not in self._before:
                continue
            before = self._before[spec.signature]
            if spec.name in executed.stored_names:
                after = executed.frame.f_locals.get(spec.name, MISSING)
                if self._interpret(after) != self._interpret(before):
                    should_break = True
            elif executed.is_return or spec.name in executed.deleted_names:
                if self._interpret(before) is not None:
                    self._retained[spec.signature] = _Retained(executed.function, before)
                    should_break = True
        return set() if should_break else None

    def _interpret(self, value: Any) -> Any:
        if value is MISSING:
            return None
        return self.interpret(value)


class BooleanLocalVariable(LocalVariableProvider):
    """true__<function>__<var> / false__<function>__<var>"""

    config_key = "label.BooleanLocalVariable.variable"

    def interpret(self, value):
        return value if isinstance(value, bool) else None

    def label(self, spec, function, value):
        if not isinstance(value, bool):
            return None
        return Label(
            f"{str(value).lower()}__{mangle(function)}__{mangle(spec.name)}",
            f"{function}:{spec.name} = {value}",
        )


class PositiveIntegerLocalVariable(LocalVariableProvider):
    """<function>__<var> while the variable is a positive integer"""

    config_key = "label.PositiveIntegerLocalVariable.variable"

    def interpret(self, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return value > 0
        return None

    def label(self, spec, function, value):
        if not self.interpret(value):
            return None
        return Label(f"{mangle(function)}__{mangle(spec.name)}", f"{function}:{spec.name} > 0")
