"""
Graphviz writer (<name>.dot) for the labeled state space.

Every state the search advances to, new or revisited, adds an edge from the
state the search was in. A labeled state is drawn as a wedged pie of its
label colors; the colors are explained by <sut>_legend.dot, written once the
search finishes.
"""

from typing import Iterable, Optional

from ..config import LabelConfig
from ..search.dfs import INITIAL_STATE_ID
from .colors import COLOR_SCHEME, color_of
from .listener import StateLabelListener
from .provider import StateLabelProvider

LEGEND_SUFFIX = "_legend.dot"


class StateLabelDot(StateLabelListener):
    extension = ".dot"

    def __init__(
        self,
        config: Optional[LabelConfig] = None,
        providers: Optional[Iterable[StateLabelProvider]] = None,
    ):
        super().__init__(config, providers)
        self.current = INITIAL_STATE_ID
        self._nodes: list[str] = []
        self._edges: list[str] = []

    def state_advanced(self, search):
        super().state_advanced(search)
        self._edges.append(f"{self.current} -> {search.state_id}\n")
        self.current = search.state_id

    def state_backtracked(self, search):
        self.current = search.state_id

    def state_restored(self, search):
        self.current = search.state_id

    def label_state(self, state_id: int, labels: set[int]) -> None:
        if not labels:
            return
        colors = [color_of(i) for i in sorted(labels)]
        if len(colors) == 1:
            self._nodes.append(f"{state_id} [style=filled fillcolor={colors[0]}]\n")
        else:
            self._nodes.append(f'{state_id} [fillcolor="{":".join(colors)}"]\n')

    def render(self) -> str:
        return (
            "digraph statespace {\n"
            f'node [colorscheme="{COLOR_SCHEME}" style=wedged]\n'
            + "".join(self._nodes)
            + "".join(self._edges)
            + "}\n"
        )

    def write_state_labels(self, search, name: str) -> None:
        self._write(search, self.output_path(name), self.render())

    def search_finished(self, search):
        super().search_finished(search)
        self._write(search, self.output_path(search.sut_name, LEGEND_SUFFIX), self.legend())
