"""
Depth-first exploration of Python programs over CPython bytecode.

The search observes the program instruction by instruction and notifies
SearchListeners of state boundaries, backtracking and completion.
"""

from .dfs import Search, INITIAL_STATE_ID, DEPTH_CONSTRAINT, STATES_CONSTRAINT
from .instruction import Instruction, frame_function_name, frame_owner
from .listener import SearchListener

__all__ = [
    "Search",
    "INITIAL_STATE_ID",
    "DEPTH_CONSTRAINT",
    "STATES_CONSTRAINT",
    "Instruction",
    "frame_function_name",
    "frame_owner",
    "SearchListener",
]
