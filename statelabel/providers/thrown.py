"""
Labels explicit raise statements of watched exception types.
"""

from ..config import LabelConfig
from ..labels.label import Label
from ..labels.provider import TransitionLabelProvider, get_configured_list
from .signatures import check_dotted, mangle, qualified_type_name


class ThrownException(TransitionLabelProvider):
    """
    Cuts the transition after a raise of a watched type.

    Types are matched exactly by qualified name (ValueError, module.MyError);
    subclasses do not match.
    """

    config_key = "label.ThrownException.type"

    def __init__(self, config: LabelConfig):
        self.types = get_configured_list(config, self.config_key)
        for name in self.types:
            check_dotted(name, "exception")

    def break_after(self, executed):
        if not executed.is_raise or executed.exception is None:
            return None
        name = qualified_type_name(executed.exception)
        if name not in self.types:
            return None
        return {Label(mangle(name), name)}
