"""
Labels and the run-wide label registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class Label:
    """
    A semantic property of a state.

    name: token used in the label-assignment file (ASCII, no spaces)
    description: short human-readable text, used in the legend
    """
    name: str
    description: str

    def __str__(self) -> str:
        return self.name


class LabelRegistry:
    """
    Append-only store assigning each distinct label a stable index.

    Indices follow first-interning order, which is exploration order.
    Structurally equal labels share one index; nothing is ever removed.
    """

    def __init__(self) -> None:
        self._labels: list[Label] = []
        self._indices: dict[Label, int] = {}

    def intern(self, label: Label) -> int:
        index = self._indices.get(label)
        if index is None:
            index = len(self._labels)
            self._labels.append(label)
            self._indices[label] = index
        return index

    def index_of(self, label: Label) -> Optional[int]:
        return self._indices.get(label)

    def get(self, index: int) -> Label:
        return self._labels[index]

    def count(self) -> int:
        return len(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[Label]:
        return iter(self._labels)

    def __contains__(self, label: object) -> bool:
        return label in self._indices

    def __repr__(self) -> str:
        return f"LabelRegistry({len(self._labels)} labels)"
