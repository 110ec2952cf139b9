"""
State fingerprints for state matching.

A fingerprint abstracts the explored program's state into a hashable value:
the position of every target frame, the primitive contents of its locals and
of the target module's globals, and the kind of boundary the state sits on.
Two boundaries with equal fingerprints are the same state.

Objects are abstracted structurally up to MAX_DEPTH; anything deeper or
opaque is represented by its type only.
"""

import inspect
import types
from typing import Any, Hashable, Iterable, Optional


MAX_DEPTH = 4

_PRIMITIVES = (bool, int, float, complex, str, bytes, type(None))
_CALLABLES = (
    types.FunctionType, types.BuiltinFunctionType, types.MethodType,
    types.BuiltinMethodType, staticmethod, classmethod, property,
)


def _is_dunder(name: Any) -> bool:
    return isinstance(name, str) and name.startswith("__") and name.endswith("__")


def _freeze_namespace(namespace: dict, owner: str, depth: int) -> tuple:
    items = []
    for name, value in namespace.items():
        if _is_dunder(name):
            continue
        key = name if isinstance(name, str) else repr(freeze(name, owner, depth + 1))
        items.append((key, freeze(value, owner, depth + 1)))
    items.sort(key=lambda item: item[0])
    return tuple(items)


def freeze(value: Any, owner: str, depth: int = 0) -> Hashable:
    """
    Hashable structural abstraction of a value.

    owner is the target module name: classes defined there are part of the
    program state (their attributes are static fields), other classes are
    represented by name.
    """
    if isinstance(value, _PRIMITIVES):
        return (type(value).__name__, value)
    if depth >= MAX_DEPTH:
        return ("...", type(value).__qualname__)
    if isinstance(value, (list, tuple)):
        return (type(value).__name__, tuple(freeze(v, owner, depth + 1) for v in value))
    if isinstance(value, (set, frozenset)):
        frozen = [freeze(v, owner, depth + 1) for v in value]
        return ("set", tuple(sorted(frozen, key=repr)))
    if isinstance(value, dict):
        return ("dict", _freeze_namespace(value, owner, depth))
    if isinstance(value, types.ModuleType):
        return ("module", value.__name__)
    if isinstance(value, _CALLABLES):
        return ("function", getattr(value, "__qualname__", type(value).__qualname__))
    if isinstance(value, type):
        if value.__module__ == owner:
            return ("class", value.__qualname__, _freeze_namespace(vars(value), owner, depth))
        return ("class", value.__module__, value.__qualname__)
    namespace = getattr(value, "__dict__", None)
    if isinstance(namespace, dict):
        return ("object", type(value).__qualname__, _freeze_namespace(namespace, owner, depth))
    return ("opaque", type(value).__qualname__)


def _frame_locals(frame: types.FrameType, owner: str) -> tuple:
    if not frame.f_code.co_flags & inspect.CO_OPTIMIZED:
        # Module and class bodies: locals are the globals or a class namespace
        # that is captured elsewhere.
        return ()
    return _freeze_namespace(dict(frame.f_locals), owner, 0)


def target_frames(frame: Optional[types.FrameType], filename: str) -> list[types.FrameType]:
    """Frames of the explored program on the current stack, outermost first."""
    frames = []
    while frame is not None:
        if frame.f_code.co_filename == filename:
            frames.append(frame)
        frame = frame.f_back
    frames.reverse()
    return frames


def state_fingerprint(
    frames: Iterable[types.FrameType],
    module: Optional[types.ModuleType],
    boundary: Hashable,
) -> Hashable:
    """Fingerprint of the program state at a state boundary."""
    owner = module.__name__ if module is not None else ""
    positions = tuple(
        (
            frame.f_code.co_qualname,
            frame.f_code.co_firstlineno,
            frame.f_lasti,
            _frame_locals(frame, owner),
        )
        for frame in frames
    )
    globals_ = _freeze_namespace(vars(module), owner, 0) if module is not None else ()
    return (boundary, positions, globals_)
