"""
Providers that label states by the value of static fields.

A static field is a module global or a class attribute of the explored
program. The transition is cut right after an instruction that stores to a
watched field and changes its value, so the new value gets a state of its own.
"""

from typing import Any, ClassVar

from ..config import LabelConfig
from ..labels.label import Label
from ..labels.provider import TransitionLabelProvider, get_configured_list
from .signatures import MISSING, FieldSpec, mangle


class StaticFieldProvider(TransitionLabelProvider):
    """Shared break logic; subclasses say which values count and how to label them."""

    config_key: ClassVar[str]

    def __init__(self, config: LabelConfig):
        self.fields = [FieldSpec.parse(s) for s in get_configured_list(config, self.config_key)]
        self._previous: dict[str, Any] = {}

    def accepts(self, value: Any) -> bool:
        raise NotImplementedError

    def label(self, spec: FieldSpec, value: Any) -> Label:
        raise NotImplementedError

    def _value(self, spec: FieldSpec) -> Any:
        value = spec.value()
        if value is MISSING or not self.accepts(value):
            return None
        return value

    def get_state_labels(self, search):
        labels = set()
        for spec in self.fields:
            value = self._value(spec)
            if value is not None:
                labels.add(self.label(spec, value))
        return labels

    def before_instruction(self, instruction):
        self._previous = {}
        for spec in self.fields:
            if spec.matches(instruction):
                self._previous[spec.signature] = self._value(spec)

    def break_after(self, executed):
        for spec in self.fields:
            if spec.matches(executed) and self._value(spec) != self._previous.get(spec.signature):
                return set()
        return None


class BooleanStaticField(StaticFieldProvider):
    """true__<field> / false__<field>"""

    config_key = "label.BooleanStaticField.field"

    def accepts(self, value):
        return isinstance(value, bool)

    def label(self, spec, value):
        return Label(f"{str(value).lower()}__{mangle(spec.signature)}", f"{spec.signature} = {value}")


class IntegerStaticField(StaticFieldProvider):
    """<n>__<field>, minus<n>__<field> for negative values"""

    config_key = "label.IntegerStaticField.field"

    def accepts(self, value):
        return isinstance(value, int) and not isinstance(value, bool)

    def label(self, spec, value):
        magnitude = f"minus{abs(value)}" if value < 0 else str(value)
        return Label(f"{magnitude}__{mangle(spec.signature)}", f"{spec.signature} = {value}")
