"""
Provider protocol: units that produce labels for states.

Two roles:
- StateLabelProvider: asked once per new state for the labels that hold there.
- TransitionLabelProvider: additionally watches every instruction and may
  end the current transition early so that a state boundary falls exactly
  where something interesting happened.

The orchestrator asks a provider which role it plays through
``handles_transitions`` instead of inspecting its class.

A None result always means "no opinion". An empty set returned from
break_after/break_before still forces a break, it just adds no labels.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from ..config import LabelConfig
from .label import Label


class StateLabelProvider:
    """Labels states by reading the observable program state."""

    handles_transitions: ClassVar[bool] = False

    def get_state_labels(self, search: Any) -> Optional[set[Label]]:
        """
        Return the labels of the state being finalized.

        Called once for the initial state and once for every newly reached
        state. Must not change the explored program's state.
        """
        return None


class TransitionLabelProvider(StateLabelProvider):
    """Labels states and decides where transitions are cut."""

    handles_transitions: ClassVar[bool] = True

    def break_after(self, executed: Any) -> Optional[set[Label]]:
        """
        Inspect the instruction that just executed.

        Returns the labels for a new state to be created right after it, or
        None to leave the transition alone.
        """
        return None

    def break_before(self, next_instruction: Any) -> Optional[set[Label]]:
        """
        Inspect the instruction about to execute.

        Same contract as break_after, for conditions visible only before the
        instruction runs.
        """
        return None

    def before_instruction(self, instruction: Any) -> None:
        """
        Snapshot anything the instruction is about to overwrite or take out
        of scope. Never requests a break.
        """


def get_configured_list(config: LabelConfig, key: str) -> list[str]:
    """Return the ';'-separated, trimmed, non-empty entries stored under key."""
    return config.get_list(key)
