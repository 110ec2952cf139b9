"""
Shared fakes for driving label writers and providers without a real search.
"""

from types import SimpleNamespace

import pytest

from statelabel.search.instruction import frame_function_name


class FakeSearch:
    """Answers the queries label writers make; records their requests."""

    def __init__(self, sut_name="sut"):
        self.sut_name = sut_name
        self.state_id = -1
        self.search_constraint = None
        self.top_frame = None
        self.new_state = True
        self.end_state = False
        self.breaks = []
        self.terminated = False

    def is_new_state(self):
        return self.new_state

    def is_end_state(self):
        return self.end_state

    def break_transition(self, reason):
        self.breaks.append(reason)

    def terminate(self):
        self.terminated = True

    def advance(self, listener, state_id, new=True, end=False):
        self.state_id = state_id
        self.new_state = new
        self.end_state = end
        listener.state_advanced(self)

    def backtrack(self, listener, state_id):
        self.state_id = state_id
        self.new_state = False
        self.end_state = False
        listener.state_backtracked(self)


def make_frame(function="mod.func", f_locals=None, f_back=None):
    """A stand-in for a frame executing ``function`` (module.qualname)."""
    module, _, qualname = function.rpartition(".")
    return SimpleNamespace(
        f_globals={"__name__": module},
        f_code=SimpleNamespace(co_qualname=qualname, co_name=qualname.rsplit(".", 1)[-1]),
        f_locals={} if f_locals is None else f_locals,
        f_back=f_back,
    )


def make_instruction(frame=None, **attributes):
    """A stand-in for statelabel.search.Instruction with no effects by default."""
    frame = frame or make_frame()
    fields = dict(
        opname="NOP",
        frame=frame,
        function=frame_function_name(frame),
        is_entry=False,
        is_return=False,
        returned=False,
        return_value=None,
        is_raise=False,
        exception=None,
        stored_names=(),
        deleted_names=(),
        stored_field=None,
    )
    fields.update(attributes)
    return SimpleNamespace(**fields)


@pytest.fixture
def search():
    return FakeSearch()
