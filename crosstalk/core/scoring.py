########## Scoring Policy ##########
# Turns a raw outcome plus streak and mood context into score and mood deltas.

from __future__ import annotations

from . import config
from .types import Outcome, ScoreDelta


def clamp_mood(value: int) -> int:
    """Clamp helper for mood values."""

    if value < config.MOOD_MIN:
        return config.MOOD_MIN
    if value > config.MOOD_MAX:
        return config.MOOD_MAX
    return value


def apply_scoring(
    outcome: Outcome,
    prior_mood: int,
    prior_cheer_streak: int,
    prior_boo_streak: int,
) -> ScoreDelta:
    """Return deltas and new streaks for one outcome; no randomness."""

    # 1 Update streaks before computing anything that depends on them.        # steps
    # 2 Apply the per-outcome mood and bonus rules.                            # steps
    if outcome == Outcome.BEST:
        cheer_streak = prior_cheer_streak + 1
        boo_streak = 0
    elif outcome == Outcome.WORST:
        cheer_streak = 0
        boo_streak = prior_boo_streak + 1
    else:
        cheer_streak = 0
        boo_streak = 0

    cheer_delta = 0
    boo_delta = 0
    mood_delta = 0
    if outcome == Outcome.BEST:
        cheer_delta = 1
        gain = config.CHEER_MOOD_GAIN + max(0, cheer_streak - 1) * config.CHEER_STREAK_MOOD_STEP
        if prior_mood >= config.HOT_CROWD_MOOD:
            cheer_delta += 1
            gain = max(config.HOT_CROWD_MIN_GAIN, gain - config.HOT_CROWD_MOOD_DAMPING)
        mood_delta = gain
    elif outcome == Outcome.WORST:
        boo_delta = 1
        loss = config.BOO_MOOD_LOSS + max(0, boo_streak - 1) * config.BOO_STREAK_MOOD_STEP
        mood_delta = -loss
        if prior_mood <= config.COLD_CROWD_MOOD:
            # effective threshold is FROZEN_CROWD_MOOD
            if prior_mood < config.FROZEN_CROWD_MOOD:
                boo_delta += 1
    else:
        if prior_mood > config.NEUTRAL_MOOD_PIVOT:
            mood_delta = -config.NEUTRAL_COOLING
        elif prior_mood < config.NEUTRAL_MOOD_PIVOT:
            mood_delta = config.NEUTRAL_WARMING

    return ScoreDelta(
        cheer_delta=cheer_delta,
        boo_delta=boo_delta,
        mood_delta=mood_delta,
        new_cheer_streak=cheer_streak,
        new_boo_streak=boo_streak,
    )
