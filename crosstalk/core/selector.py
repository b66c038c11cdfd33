########## Session Selector ##########
# Chooses which script backs a new session, avoiding back-to-back repeats.

from __future__ import annotations

import random
from typing import Optional, Tuple

from .logs import log_run_event
from .scripts import ScriptConfigError, ScriptRepository
from .types import Script


class ScriptSelector:
    """Picks scripts explicitly or at random and remembers the last pick."""

    def __init__(self, repository: ScriptRepository, rng: Optional[random.Random] = None) -> None:
        self.repository = repository
        self.random = rng or random.Random()
        self.last_selected_index: Optional[int] = None

    def select(self, explicit_index: Optional[int] = None) -> Tuple[Script, int]:
        """Return (script, index) for the requested or a random script."""

        # 1 Honour an in-range explicit index.                                  # steps
        # 2 Otherwise redraw until the pick differs from the previous one.      # steps
        count = len(self.repository)
        if count == 0:
            raise ScriptConfigError("no scripts to select from")
        if explicit_index is not None and 0 <= explicit_index < count:
            target = explicit_index
        elif count == 1:
            target = 0
        else:
            if explicit_index is not None:
                log_run_event(f"script index {explicit_index} out of range, picking at random")
            target = self.random.randrange(count)
            while target == self.last_selected_index:
                target = self.random.randrange(count)
        self.last_selected_index = target
        return self.repository.get(target), target
