"""
Providers that label states by their position in the search.
"""

from typing import Optional

from ..config import LabelConfig
from ..labels.label import Label
from ..labels.provider import StateLabelProvider


class Initial(StateLabelProvider):
    """Labels the initial state 'init'."""

    LABEL = Label("init", "initial")

    def __init__(self, config: Optional[LabelConfig] = None):
        self._initial = True

    def get_state_labels(self, search):
        if not self._initial:
            return None
        self._initial = False
        return {self.LABEL}


class End(StateLabelProvider):
    """Labels final states 'end'."""

    LABEL = Label("end", "end")

    def __init__(self, config: Optional[LabelConfig] = None):
        pass

    def get_state_labels(self, search):
        if search.is_end_state():
            return {self.LABEL}
        return None


class AllDifferent(StateLabelProvider):
    """Gives every state its own label: _0, _1, ..."""

    def __init__(self, config: Optional[LabelConfig] = None):
        self._count = 0

    def get_state_labels(self, search):
        name = f"_{self._count}"
        self._count += 1
        return {Label(name, f"state {name}")}
