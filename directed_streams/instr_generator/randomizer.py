# Copyright (c) 2024-2025 Institute of Information Engineering, Chinese Academy of Sciences
#
# DiveFuzz is licensed under Mulan PSL v2.
# You can use this software according to the terms and conditions of the Mulan PSL v2.
# You may obtain a copy of Mulan PSL v2 at:
#          http://license.coscl.org.cn/MulanPSL2
#
# THIS SOFTWARE IS PROVIDED ON AN "AS IS" BASIS, WITHOUT WARRANTIES OF ANY KIND,
# EITHER EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO NON-INFRINGEMENT,
# MERCHANTABILITY OR FIT FOR A PARTICULAR PURPOSE.
#
# See the Mulan PSL v2 for more details.

"""
Seedable random source shared by all streams of one generated program.

Uniform draws come from `random.Random`; weighted draws over instruction
categories go through numpy, the same way the extension mix is sampled in the
main generator loop.
"""

import logging
import random
from typing import Callable, Iterable, Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)


class Randomizer:

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rand = random.Random(seed)
        self._np_rng = np.random.default_rng(seed)

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in the closed range [low, high]."""
        return self._rand.randint(low, high)

    def random(self) -> float:
        return self._rand.random()

    def getrandbits(self, k: int) -> int:
        return self._rand.getrandbits(k)

    def choice(self, seq: Sequence):
        return self._rand.choice(seq)

    def coin(self) -> bool:
        return self._rand.getrandbits(1) == 1

    def weighted_choice(self, items: Sequence, weights: Sequence[float]):
        """Pick one item with the given (not necessarily normalized) weights."""
        if len(items) != len(weights):
            raise ValueError("items and weights must have the same length")
        p = np.asarray(weights, dtype=float)
        total = p.sum()
        if total <= 0:
            raise ValueError("weights must sum to a positive value")
        idx = int(self._np_rng.choice(len(items), p=p / total))
        return items[idx]

    def pick_index(self, candidates: Iterable[int], *predicates: Callable[[int], bool]) -> Optional[int]:
        """
        Constrained pick: a uniformly chosen candidate satisfying every predicate.

        Returns:
            The chosen index, or None when no candidate satisfies the constraints.
        """
        valid = [c for c in candidates if all(pred(c) for pred in predicates)]
        if not valid:
            logger.debug("Constraint unsatisfiable: no candidate left")
            return None
        return self._rand.choice(valid)
