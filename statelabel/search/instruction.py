"""
Bytecode instructions as observed by the search.

Target: Python 3.11+ bytecode. An Instruction pairs the static dis.Instruction
with the live frame executing it, so providers can read the values an
instruction touches. The search fills in the effects only visible once the
instruction has run (returned value, raised exception type).
"""

import dis
import types
from dataclasses import dataclass, field
from typing import Any, Optional


RETURN_OPS = frozenset({"RETURN_VALUE", "RETURN_CONST"})
RAISE_OPS = frozenset({"RAISE_VARARGS"})

# Opcodes that bind a name in the executing frame's local namespace.
LOCAL_STORE_OPS = frozenset({
    "STORE_FAST", "STORE_FAST_MAYBE_NULL", "STORE_DEREF", "STORE_NAME",
})
LOCAL_DELETE_OPS = frozenset({"DELETE_FAST", "DELETE_DEREF", "DELETE_NAME"})

# Opcodes that write a module or class attribute.
FIELD_STORE_OPS = frozenset({"STORE_GLOBAL", "STORE_NAME", "STORE_ATTR"})


def frame_function_name(frame: types.FrameType) -> str:
    """
    Qualified name of the code a frame executes: ``module.qualname``.

    Module-level code is ``module.<module>``, a class body ``module.Class``.
    """
    module = frame.f_globals.get("__name__", "?")
    code = frame.f_code
    return f"{module}.{getattr(code, 'co_qualname', code.co_name)}"


def frame_owner(frame: types.FrameType) -> str:
    """Namespace written by STORE_NAME in this frame: a module or a class."""
    module = frame.f_globals.get("__name__", "?")
    qualname = getattr(frame.f_code, "co_qualname", frame.f_code.co_name)
    if qualname == "<module>":
        return module
    return f"{module}.{qualname}"


@dataclass(eq=False)
class Instruction:
    """
    One executed (or about to be executed) bytecode instruction.

    is_entry: first instruction of a fresh call of its code object
    returned / return_value: set once a return instruction completed
    exception: type of the exception the instruction raised, if any
    """
    op: dis.Instruction
    frame: types.FrameType
    is_entry: bool = False
    returned: bool = False
    return_value: Any = None
    exception: Optional[type] = None
    function: str = field(init=False)

    def __post_init__(self):
        self.function = frame_function_name(self.frame)

    @property
    def opname(self) -> str:
        return self.op.opname

    @property
    def argval(self) -> Any:
        return self.op.argval

    @property
    def offset(self) -> int:
        return self.op.offset

    @property
    def code(self) -> types.CodeType:
        return self.frame.f_code

    @property
    def module(self) -> str:
        return self.frame.f_globals.get("__name__", "?")

    @property
    def is_return(self) -> bool:
        return self.op.opname in RETURN_OPS

    @property
    def is_raise(self) -> bool:
        return self.op.opname in RAISE_OPS

    @property
    def stored_names(self) -> tuple[str, ...]:
        """Local names this instruction binds."""
        opname = self.op.opname
        if opname in LOCAL_STORE_OPS:
            return (self.op.argval,)
        if opname == "STORE_FAST_STORE_FAST":
            return tuple(self.op.argval)
        if opname == "STORE_FAST_LOAD_FAST":
            # argval is (stored, loaded)
            return (self.op.argval[0],)
        return ()

    @property
    def deleted_names(self) -> tuple[str, ...]:
        if self.op.opname in LOCAL_DELETE_OPS:
            return (self.op.argval,)
        return ()

    @property
    def stored_field(self) -> Optional[tuple[Optional[str], str]]:
        """
        (owner, attribute) written by this instruction, or None.

        The owner is a module or class name; it is None for STORE_ATTR, whose
        target object is only known at run time.
        """
        opname = self.op.opname
        if opname == "STORE_GLOBAL":
            return (self.module, self.op.argval)
        if opname == "STORE_NAME":
            return (frame_owner(self.frame), self.op.argval)
        if opname == "STORE_ATTR":
            return (None, self.op.argval)
        return None

    def __str__(self) -> str:
        if self.op.argrepr:
            return f"{self.function}@{self.offset} {self.opname} {self.op.argrepr}"
        return f"{self.function}@{self.offset} {self.opname}"
