"""
Target signatures used in label configurations.

    field      module.attr, module.Class.attr
    function   module.qualname, shell-style wildcards allowed (toggle.*)
    variable   module.qualname:var
    exception  ValueError, zlib.error, module.MyError

Signatures name code of the explored program, whose module is named after its
file stem. Labels embed signatures in mangled form: every character other than
an ASCII letter, digit or '_' is replaced by '_'.
"""

import re
import sys
import types
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any, Optional

from ..exceptions import ConfigurationError
from ..search.instruction import frame_function_name

_MANGLED = re.compile(r"[^0-9A-Za-z_]")
_FUNCTION_PATTERN = re.compile(r"^[\w.<>*?\[\]!-]+$")


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


# Marks a field or variable that does not exist (yet, or any more).
MISSING = _Missing()


def mangle(signature: str) -> str:
    return _MANGLED.sub("_", signature)


def qualified_type_name(cls: type) -> str:
    """ValueError for builtins, module.Qualname otherwise."""
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def resolve_attribute(dotted: str) -> Any:
    """
    Current value of ``module.attr`` or ``module.Class.attr``.

    Only already loaded modules are consulted (the longest loaded module
    prefix wins); nothing is imported and no descriptors run. Returns
    MISSING if the attribute does not exist.
    """
    parts = dotted.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module = sys.modules.get(".".join(parts[:split]))
        if module is None:
            continue
        value: Any = module
        for name in parts[split:]:
            try:
                namespace = vars(value)
            except TypeError:
                return MISSING
            if name not in namespace:
                return MISSING
            value = namespace[name]
        return value
    return MISSING


def check_dotted(signature: str, kind: str) -> None:
    if not all(part.isidentifier() for part in signature.split(".")):
        raise ConfigurationError(f"Malformed {kind} signature: {signature!r}")


@dataclass(frozen=True)
class FieldSpec:
    """A module global or class attribute: ``module.attr`` / ``module.Class.attr``."""
    signature: str
    owner: str
    name: str

    @classmethod
    def parse(cls, signature: str) -> "FieldSpec":
        signature = signature.strip()
        owner, _, name = signature.rpartition(".")
        if not owner:
            raise ConfigurationError(f"Field signature needs an owner: {signature!r}")
        check_dotted(signature, "field")
        return cls(signature, owner, name)

    def matches(self, instruction) -> bool:
        """Does the instruction store to this field?"""
        stored = instruction.stored_field
        if stored is None:
            return False
        owner, name = stored
        # STORE_ATTR targets are only known at run time: match on the name
        # and let the value comparison decide.
        return name == self.name and (owner is None or owner == self.owner)

    def value(self) -> Any:
        return resolve_attribute(self.signature)


@dataclass(frozen=True)
class FunctionSpec:
    """A pattern over qualified function names."""
    pattern: str

    @classmethod
    def parse(cls, pattern: str) -> "FunctionSpec":
        pattern = pattern.strip()
        if not pattern or not _FUNCTION_PATTERN.match(pattern):
            raise ConfigurationError(f"Malformed function signature: {pattern!r}")
        return cls(pattern)

    def matches(self, function: str) -> bool:
        return fnmatchcase(function, self.pattern)


@dataclass(frozen=True)
class VariableSpec:
    """A local variable of a function: ``module.qualname:var``."""
    signature: str
    function: FunctionSpec
    name: str

    @classmethod
    def parse(cls, signature: str) -> "VariableSpec":
        signature = signature.strip()
        function, colon, name = signature.partition(":")
        name = name.strip()
        if not colon or not name.isidentifier():
            raise ConfigurationError(f"Malformed variable signature: {signature!r}")
        return cls(signature, FunctionSpec.parse(function), name)

    def find(self, frame: Optional[types.FrameType]) -> Optional[tuple[str, Any]]:
        """
        (function, value) of the variable in the innermost matching frame on
        the stack starting at frame, or None if no such frame binds it.
        """
        while frame is not None:
            function = frame_function_name(frame)
            if self.function.matches(function):
                local_vars = frame.f_locals
                if self.name in local_vars:
                    return function, local_vars[self.name]
            frame = frame.f_back
        return None
