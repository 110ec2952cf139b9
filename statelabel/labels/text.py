"""
Label-assignment writer (<name>.lab).

Format:

    0="init" 1="end" 2="true__toggle_value"
    -1: 0
    3: 1 2

The first line enumerates every label as index="name", each entry followed
by a space. Each further line lists the label indices of one state,
ascending; states without labels are left out.
"""

from typing import Iterable, Optional

from ..config import LabelConfig
from .listener import StateLabelListener
from .provider import StateLabelProvider


class StateLabelText(StateLabelListener):
    extension = ".lab"

    def __init__(
        self,
        config: Optional[LabelConfig] = None,
        providers: Optional[Iterable[StateLabelProvider]] = None,
    ):
        super().__init__(config, providers)
        self._lines: list[str] = []

    def label_state(self, state_id: int, labels: set[int]) -> None:
        if labels:
            indices = " ".join(str(i) for i in sorted(labels))
            self._lines.append(f"{state_id}: {indices}\n")

    def enumerate_labels(self) -> str:
        return "".join(f'{i}="{label.name}" ' for i, label in enumerate(self.registry))

    def render(self) -> str:
        return self.enumerate_labels() + "\n" + "".join(self._lines)

    def write_state_labels(self, search, name: str) -> None:
        self._write(search, self.output_path(name), self.render())
