"""
Seed source for repeated, nominally independent estimates.

Each estimate gets its own child of one root SeedSequence. The root
draws OS entropy unless given explicit entropy, and recording that
entropy is enough to replay a whole experiment.
"""

from typing import List, Sequence, Union

import numpy as np


class SeedSource:
    """Hands out independent child seeds spawned from one root SeedSequence."""

    def __init__(self, entropy: Union[int, Sequence[int], None] = None):
        self._root = np.random.SeedSequence(entropy)

    @property
    def entropy(self):
        """Root entropy; pass it back in to replay the same seeds."""
        return self._root.entropy

    @property
    def n_spawned(self) -> int:
        return self._root.n_children_spawned

    def next(self) -> np.random.SeedSequence:
        return self._root.spawn(1)[0]

    def spawn(self, n: int) -> List[np.random.SeedSequence]:
        return self._root.spawn(n)
