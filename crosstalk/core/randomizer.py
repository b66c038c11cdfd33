########## Option Randomizer ##########
# Produces a fresh presentation order for a turn's options.

from __future__ import annotations

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def shuffle_options(options: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly shuffled copy; the input is left untouched."""

    # 1 Copy, then Fisher-Yates from the back.                                 # steps
    source = rng or random
    shuffled = list(options)
    for i in range(len(shuffled) - 1, 0, -1):
        j = source.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
