"""
Depth-first state-space search over a Python program.

The program is executed concretely on CPython and observed instruction by
instruction through sys.settrace opcode events. A transition ends (and a state
boundary is reached) when:
- a listener requests it with break_transition(),
- the program reaches a choice point (statelabel.verify.Verify), or
- the program ends.

Each boundary is matched against the states seen so far by fingerprint. New
states are expanded; revisited states, end states and states at the depth
limit end the current path.

The search is stateless: to explore the next alternative of a choice state it
backtracks to that state and re-executes the program from the start, replaying
the recorded choices silently until the choice state is reached again. Only
Verify choices are replayed, so the program must be deterministic otherwise.
"""

import dis
import logging
import sys
import types
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Hashable, Iterable, Optional

from ..config import LabelConfig
from ..verify import Verify
from .fingerprint import state_fingerprint, target_frames
from .instruction import Instruction
from .listener import SearchListener

logger = logging.getLogger(__name__)

INITIAL_STATE_ID = -1

DEPTH_CONSTRAINT = "depth"
STATES_CONSTRAINT = "states"

_BREAK = "break"
_END = "end"


class _StopPath(BaseException):
    """Unwinds the explored program when the current path is finished."""


@dataclass
class _PathEntry:
    state_id: int
    options: int = 0  # alternatives of a choice state, 0 otherwise
    choice: int = 0

    def has_alternatives(self) -> bool:
        return self.choice + 1 < self.options


class Search:
    """
    Stateless depth-first search with state matching.

    Listeners are notified in registration order. Queries available to them
    while a notification is delivered:
        state_id, is_new_state(), is_end_state(), depth, search_constraint,
        sut_name, top_frame
    and requests:
        break_transition(reason), terminate()
    """

    def __init__(
        self,
        target: Path,
        config: Optional[LabelConfig] = None,
        listeners: Iterable[SearchListener] = (),
    ):
        self.target = Path(target).resolve()
        self.config = config or LabelConfig()
        self.listeners: list[SearchListener] = list(listeners)
        self.sut_name = self.target.stem
        self.depth_limit = self.config.depth_limit
        self.max_states = self.config.max_states

        self.state_id = INITIAL_STATE_ID
        self.search_constraint: Optional[str] = None
        self.terminated = False
        self.paths = 0

        self._filename = str(self.target)
        self._code: Optional[types.CodeType] = None
        self._module: Optional[types.ModuleType] = None
        self._new_state = False
        self._end_state = False
        self._break_reason: Optional[str] = None

        self._path: list[_PathEntry] = []
        self._seen: dict[Hashable, int] = {}

        # Per-execution tracing state
        self._instructions: dict[types.CodeType, dict[int, dis.Instruction]] = {}
        self._entry_offsets: dict[types.CodeType, int] = {}
        self._frame: Optional[types.FrameType] = None
        self._previous: Optional[Instruction] = None
        self._entering: Optional[types.FrameType] = None
        self._stopping = False
        self._listener_error: Optional[Exception] = None
        self._replay: list[int] = []
        self._replaying = False
        self._choices_made = 0

    def add_listener(self, listener: SearchListener) -> None:
        self.listeners.append(listener)

    # ------------------------------------------------------------------
    # Queries and requests for listeners
    # ------------------------------------------------------------------

    def is_new_state(self) -> bool:
        return self._new_state

    def is_end_state(self) -> bool:
        return self._end_state

    @property
    def depth(self) -> int:
        return len(self._path)

    @property
    def state_count(self) -> int:
        return len(self._seen)

    @property
    def top_frame(self) -> Optional[types.FrameType]:
        """Innermost frame of the explored program, None outside an execution."""
        return self._frame

    def break_transition(self, reason: str) -> None:
        """End the current transition before the next instruction executes."""
        self._break_reason = reason

    def terminate(self) -> None:
        """Stop the search after the current notification."""
        if not self.terminated:
            logger.info(f"[SEARCH] Termination requested for {self.sut_name}")
        self.terminated = True

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Explore the target program's state space."""
        source = self.target.read_text(encoding="utf-8")
        self._code = compile(source, self._filename, "exec")

        logger.info(f"[SEARCH] Exploring {self._filename}")
        self._notify("search_started")

        previous_search = Verify._search
        Verify._search = self
        try:
            while not self.terminated:
                self._execute()
                self.paths += 1
                if self.terminated or not self._backtrack():
                    break
        finally:
            Verify._search = previous_search

        logger.info(
            f"[SEARCH] Finished {self.sut_name}: {self.state_count} states, {self.paths} paths"
        )
        self._notify("search_finished")

    def choose(self, options: int) -> int:
        """
        Choice point with the given number of alternatives.

        Called by Verify from inside the explored program. Returns the index
        of the alternative to follow.
        """
        if options < 1:
            raise ValueError(f"A choice needs at least one option, got {options}")
        # The program caught _StopPath and went on; keep unwinding it.
        if self._stopping:
            raise _StopPath()
        try:
            return self._choose(options)
        except Exception as e:
            self._abort(e)

    def _choose(self, options: int) -> int:
        if self._replaying:
            choice = self._replay[self._choices_made]
            self._choices_made += 1
            if self._choices_made == len(self._replay):
                self._replaying = False
                logger.debug(f"[SEARCH] Restored state {self.state_id}, choice {choice}")
                self._notify("state_restored")
                if self.terminated:
                    self._stop()
            return choice

        self._choices_made += 1
        if not self._advance(("choice", options), options):
            self._stop()
        return 0

    def _execute(self) -> None:
        """Run the program once, from the start, along the current path."""
        module = types.ModuleType(self.sut_name)
        module.__file__ = self._filename
        self._module = module
        self._frame = None
        self._previous = None
        self._entering = None
        self._stopping = False
        self._listener_error = None
        self._break_reason = None
        self._choices_made = 0
        self._replaying = bool(self._replay)

        saved_module = sys.modules.get(self.sut_name)
        sys.modules[self.sut_name] = module
        target_dir = str(self.target.parent)
        sys.path.insert(0, target_dir)

        completed = False
        old_trace = sys.gettrace()
        sys.settrace(self._trace_call)
        try:
            exec(self._code, module.__dict__)
            completed = True
        except _StopPath:
            pass
        except SystemExit:
            completed = True
        except Exception as e:
            completed = True
            logger.warning(f"[SEARCH] {self.sut_name} raised {type(e).__name__}: {e}")
        finally:
            sys.settrace(old_trace)
        # A stopped path is over even if the program swallowed _StopPath.
        completed = completed and not self._stopping

        try:
            if self._listener_error is not None:
                error, self._listener_error = self._listener_error, None
                raise error
            if completed and self._replaying:
                logger.warning(
                    f"[SEARCH] {self.sut_name} ended before replaying {len(self._replay)} choices; "
                    "is the program deterministic?"
                )
            elif completed:
                self._finish_path()
        finally:
            if target_dir in sys.path:
                sys.path.remove(target_dir)
            if saved_module is None:
                sys.modules.pop(self.sut_name, None)
            else:
                sys.modules[self.sut_name] = saved_module
            self._frame = None
            self._module = None

    def _finish_path(self) -> None:
        """The program ended: deliver the last instruction and the end state."""
        self._frame = None
        if self._previous is not None:
            executed, self._previous = self._previous, None
            self._instruction_executed(executed, None)
        self._break_reason = None
        if not self.terminated:
            self._advance(_END)

    def _backtrack(self) -> bool:
        """
        Pop the current path back to the deepest choice state that still has
        an untried alternative and prepare the replay to reach it.

        Returns False when the whole state space is explored.
        """
        while self._path:
            self._path.pop()
            self.state_id = self._path[-1].state_id if self._path else INITIAL_STATE_ID
            self._new_state = False
            self._end_state = False
            self._notify("state_backtracked")
            if self.terminated:
                return False
            if self._path and self._path[-1].has_alternatives():
                self._path[-1].choice += 1
                self._replay = [entry.choice for entry in self._path if entry.options]
                return True
        return False

    def _advance(self, boundary: Hashable, options: int = 0) -> bool:
        """
        Reach a state boundary. Returns True if the path continues from it.
        """
        frames = target_frames(self._frame, self._filename)
        fingerprint = state_fingerprint(frames, self._module, boundary)
        state_id = self._seen.get(fingerprint)
        self._new_state = state_id is None
        if state_id is None:
            state_id = len(self._seen)
            self._seen[fingerprint] = state_id
        self._end_state = boundary == _END
        self.state_id = state_id
        self._path.append(_PathEntry(state_id, options))

        logger.debug(
            f"[SEARCH] State {state_id} ({'new' if self._new_state else 'visited'}, {boundary}) "
            f"at depth {self.depth}"
        )
        self._notify("state_advanced")

        if self.terminated or not self._new_state or self._end_state:
            return False
        if self.max_states is not None and self.state_count >= self.max_states:
            self._constraint_hit(STATES_CONSTRAINT)
            self.terminate()
            return False
        if self.depth_limit is not None and self.depth >= self.depth_limit:
            self._constraint_hit(DEPTH_CONSTRAINT)
            return False
        return True

    def _constraint_hit(self, constraint: str) -> None:
        logger.info(f"[SEARCH] Constraint hit: {constraint}")
        self.search_constraint = constraint
        self._notify("search_constraint_hit")

    def _stop(self) -> None:
        self._stopping = True
        raise _StopPath()

    def _abort(self, error: Exception) -> None:
        """
        A listener failed while the program runs. Unwind the program and
        re-raise the error from _execute, out of the program's reach.
        """
        logger.debug(f"[SEARCH] Listener raised {type(error).__name__}, stopping {self.sut_name}")
        self._listener_error = error
        self._stop()

    # ------------------------------------------------------------------
    # Instruction stream
    # ------------------------------------------------------------------

    def _step(self, instruction: Instruction) -> None:
        self._frame = instruction.frame
        if not self._replaying:
            if self._previous is not None:
                self._instruction_executed(self._previous, instruction)
                if self._break_reason is not None:
                    logger.debug(f"[SEARCH] Transition broken: {self._break_reason}")
                    self._break_reason = None
                    if not self._advance(_BREAK):
                        self._stop()
            self._notify("execute_instruction", instruction)
            if self.terminated:
                self._stop()
        self._previous = instruction

    def _instruction_executed(self, executed: Instruction, next_instruction: Optional[Instruction]) -> None:
        self._break_reason = None
        self._notify("instruction_executed", executed, next_instruction)

    def _notify(self, event: str, *args: Any) -> None:
        for listener in self.listeners:
            getattr(listener, event)(self, *args)

    def _instruction_at(self, frame: types.FrameType, is_entry: bool) -> Optional[Instruction]:
        table = self._instruction_table(frame.f_code)
        op = table.get(frame.f_lasti)
        if op is None:
            return None
        return Instruction(op, frame, is_entry=is_entry)

    def _instruction_table(self, code: types.CodeType) -> dict[int, dis.Instruction]:
        table = self._instructions.get(code)
        if table is None:
            table = {op.offset: op for op in dis.get_instructions(code)}
            self._instructions[code] = table
        return table

    def _is_fresh_call(self, frame: types.FrameType) -> bool:
        # Generators and coroutines also report 'call' when resumed; those
        # frames are already past their first RESUME.
        code = frame.f_code
        start = self._entry_offsets.get(code)
        if start is None:
            resumes = [op.offset for op in self._instruction_table(code).values()
                       if op.opname == "RESUME"]
            start = min(resumes) if resumes else 0
            self._entry_offsets[code] = start
        return frame.f_lasti <= start

    # ------------------------------------------------------------------
    # Trace functions
    # ------------------------------------------------------------------

    def _trace_call(self, frame, event, arg):
        if self._stopping or frame.f_code.co_filename != self._filename:
            return None
        frame.f_trace_opcodes = True
        frame.f_trace_lines = False
        if self._is_fresh_call(frame):
            self._entering = frame
        return self._trace_event

    def _trace_event(self, frame, event, arg):
        if self._stopping:
            return None
        try:
            self._observe(frame, event, arg)
        except Exception as e:
            self._abort(e)
        return self._trace_event

    def _observe(self, frame, event, arg) -> None:
        if event == "opcode":
            is_entry = self._entering is frame
            if is_entry:
                self._entering = None
            instruction = self._instruction_at(frame, is_entry)
            if instruction is not None:
                self._step(instruction)
        elif event == "return":
            previous = self._previous
            if previous is not None and previous.frame is frame and previous.is_return:
                previous.returned = True
                previous.return_value = arg
        elif event == "exception":
            previous = self._previous
            if previous is not None and previous.frame is frame and previous.exception is None:
                previous.exception = arg[0]
