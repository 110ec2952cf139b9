"""
Labeling orchestrator.

StateLabelListener follows the search's notifications, asks the configured
providers for labels, cuts transitions where a transition provider asks for
it, and hands every new state's label indices to an output writer
(label_state). The writer flushes its output when the search finishes or hits
a constraint (write_state_labels).
"""

import html
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Iterable, Optional

from ..config import LabelConfig
from ..search.dfs import INITIAL_STATE_ID
from ..search.listener import SearchListener
from .colors import COLOR_SCHEME, color_of
from .label import Label, LabelRegistry
from .provider import StateLabelProvider

logger = logging.getLogger(__name__)

BREAK_REASON = "Instruction executed"


class StateLabelListener(SearchListener, ABC):
    """
    Base class of the label writers.

    Owns the label registry and the providers. Subclasses decide how a
    labeled state is recorded and how the result is written.
    """

    # File name suffix of the main output
    extension: ClassVar[str] = ""

    def __init__(
        self,
        config: Optional[LabelConfig] = None,
        providers: Optional[Iterable[StateLabelProvider]] = None,
    ):
        self.config = config or LabelConfig()
        if providers is None:
            # Deferred: the providers import the label types from this package.
            from ..providers import create_providers
            providers = create_providers(self.config)
        self.providers: list[StateLabelProvider] = list(providers)
        self.transition_providers = [p for p in self.providers if p.handles_transitions]
        self.registry = LabelRegistry()
        self.current_state_labels: set[int] = set()
        self.output_dir = self.config.output_dir

    @abstractmethod
    def label_state(self, state_id: int, labels: set[int]) -> None:
        """Record the label indices of a state."""

    @abstractmethod
    def write_state_labels(self, search, name: str) -> None:
        """Write everything recorded so far; name is the output file stem."""

    # ------------------------------------------------------------------
    # Search notifications
    # ------------------------------------------------------------------

    def search_started(self, search):
        self.current_state_labels = set()
        self._add_state_labels(search)
        self.label_state(INITIAL_STATE_ID, self.current_state_labels)
        self.current_state_labels = set()

    def state_advanced(self, search):
        if not search.is_new_state():
            return
        self._add_state_labels(search)
        self.label_state(search.state_id, self.current_state_labels)
        self.current_state_labels = set()

    def execute_instruction(self, search, instruction):
        for provider in self.transition_providers:
            provider.before_instruction(instruction)

    def instruction_executed(self, search, executed, next_instruction):
        # A new set: the previous one may already be held by a writer.
        self.current_state_labels = set()
        should_break = False
        for provider in self.transition_providers:
            should_break |= self._add_label_indices(provider.break_after(executed))
            if next_instruction is not None:
                should_break |= self._add_label_indices(provider.break_before(next_instruction))
        if should_break:
            search.break_transition(BREAK_REASON)

    def search_constraint_hit(self, search):
        self.write_state_labels(search, f"{search.sut_name}_{search.search_constraint}")

    def search_finished(self, search):
        self.write_state_labels(search, search.sut_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def output_path(self, name: str, extension: Optional[str] = None) -> Path:
        suffix = self.extension if extension is None else extension
        return self.output_dir / f"{name}{suffix}"

    def legend(self) -> str:
        """Graphviz table mapping each label's color to its description."""
        lines = [
            "digraph legend {",
            f'node [colorscheme="{COLOR_SCHEME}" shape=plaintext]',
            "{ legend_node [",
            "label=<",
            '<table border="0" cellborder="0" cellspacing="0">',
            '<tr><td colspan="2">Legend</td></tr>',
        ]
        for index, label in enumerate(self.registry):
            lines.append(
                f'<tr><td width="35" bgcolor="{color_of(index)}"></td>'
                f'<td align="left">{html.escape(label.description, quote=False)}</td></tr>'
            )
        lines += ["</table>>", "];}", "}"]
        return "\n".join(lines) + "\n"

    def _write(self, search, path: Path, content: str) -> bool:
        """Write an output file; on failure log it and terminate the search."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error(f"[LABEL] Could not write {path}: {e}")
            search.terminate()
            return False
        logger.info(f"[LABEL] Wrote {path}")
        return True

    def _add_state_labels(self, search) -> None:
        for provider in self.providers:
            self._add_label_indices(provider.get_state_labels(search))

    def _add_label_indices(self, labels: Optional[set[Label]]) -> bool:
        """Intern labels into the current state's set. False when labels is None."""
        if labels is None:
            return False
        # Sorted so first-seen indices do not depend on set iteration order
        for label in sorted(labels, key=lambda l: (l.name, l.description)):
            self.current_state_labels.add(self.registry.intern(label))
        return True
