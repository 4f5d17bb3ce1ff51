# pathsim/core/state.py
#!/usr/bin/env python3
import copy
from typing import List

from pathsim.core.types import SearchAnnotation


class SearchState:
    """Per-run annotations, one per arena index. Owned by a single search at a time."""

    def __init__(self, size: int):
        self.annotations: List[SearchAnnotation] = [SearchAnnotation() for _ in range(size)]

    def __len__(self) -> int:
        return len(self.annotations)

    def __getitem__(self, i: int) -> SearchAnnotation:
        return self.annotations[i]

    def reset(self) -> None:
        for a in self.annotations:
            a.clear()

    def snapshot(self) -> List[SearchAnnotation]:
        return copy.deepcopy(self.annotations)

    def visited_count(self) -> int:
        return sum(1 for a in self.annotations if a.visited)
