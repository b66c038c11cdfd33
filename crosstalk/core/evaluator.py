########## Turn Evaluator ##########
# Scores a submitted response against the authored turn and peeks at the next one.

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, Optional

from . import config
from .randomizer import shuffle_options
from .types import EvaluationResult, FeedbackPools, Outcome, Script

SleepFunc = Callable[[float], Awaitable[None]]


class TurnEvaluator:
    """Classifies responses and picks audience feedback after a short pause."""

    def __init__(
        self,
        pools: Optional[FeedbackPools] = None,
        rng: Optional[random.Random] = None,
        delay_seconds: Optional[float] = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.pools = pools or FeedbackPools()
        self.random = rng or random.Random()
        self.delay_seconds = config.THINKING_DELAY_SECONDS if delay_seconds is None else delay_seconds
        self.sleep = sleep

    async def evaluate(self, script: Script, turn_index: int, chosen_text: str) -> EvaluationResult:
        """Evaluate the response given on the 1-based turn_index."""

        # 1 Pause for the simulated thinking time.                              # steps
        # 2 Guard against turns past the end of the script.                     # steps
        # 3 Match the response by text and classify it.                         # steps
        # 4 Attach the next lead line and freshly shuffled options.             # steps
        if self.delay_seconds > 0:
            await self.sleep(self.delay_seconds)
        turn = script.turn_at(turn_index)
        if turn is None:
            return EvaluationResult(
                outcome=Outcome.NEUTRAL,
                feedback=self.pools.closing,
                has_next_turn=False,
                is_game_over=True,
            )
        chosen = turn.option_by_text(chosen_text)
        chosen_id = chosen.id if chosen is not None else None
        if chosen_id == turn.best_id:
            outcome = Outcome.BEST
        elif chosen_id == turn.worst_id:
            outcome = Outcome.WORST
        else:
            outcome = Outcome.NEUTRAL
        feedback = self.random.choice(self.pools.pool_for(outcome))
        next_turn = script.turn_at(turn_index + 1)
        has_next = next_turn is not None
        return EvaluationResult(
            outcome=outcome,
            chosen_option_id=chosen_id,
            cheer_impact=1 if outcome == Outcome.BEST else 0,
            boo_impact=1 if outcome == Outcome.WORST else 0,
            feedback=feedback,
            has_next_turn=has_next,
            is_game_over=not has_next,
            next_lead_line=next_turn.lead_line if next_turn is not None else None,
            next_options=shuffle_options(next_turn.options, self.random) if next_turn is not None else [],
        )
