"""
statelabel: labeled state spaces for Python programs.

Explores a Python program's reachable states (depth-first, over CPython
bytecode, with explicit choice points) and labels the explored states:
1. LAB: a label-assignment file (<name>.lab) mapping state ids to label indices
2. DOT: a Graphviz rendering of the state space, colored by label
3. LEGEND: a Graphviz table mapping colors to label descriptions

Labels come from configurable providers that watch fields, local variables,
function calls and returns, and raised exceptions.
"""

__version__ = "0.1.0"
