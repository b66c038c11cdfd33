########## Stage Engine ##########
# Drives a session through start, playing, and game over, including encores.

from __future__ import annotations

import asyncio
import random
from typing import List, Optional, Union

from . import config
from .curtain import can_encore, feedback_label
from .evaluator import SleepFunc, TurnEvaluator
from .logs import log_run_event
from .randomizer import shuffle_options
from .scoring import apply_scoring, clamp_mood
from .scripts import ScriptRepository, default_repository
from .selector import ScriptSelector
from .types import (
    EncoreResult,
    Phase,
    Session,
    SessionSnapshot,
    Speaker,
    StartFailure,
    TranscriptEntry,
)


class StageEngine:
    """Owns one session at a time and applies every transition atomically."""

    def __init__(
        self,
        repository: Optional[ScriptRepository] = None,
        rng: Optional[random.Random] = None,
        evaluator: Optional[TurnEvaluator] = None,
        start_delay: Optional[float] = None,
        thinking_delay: Optional[float] = None,
        encore_delay: Optional[float] = None,
        feedback_window: Optional[float] = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        # 1 Keep collaborators; the repository may load lazily on first start. # steps
        # 2 Begin in a pristine Start session.                                 # steps
        self.random = rng or random.Random(config.RANDOM_SEED)
        self.repository = repository
        self.selector: Optional[ScriptSelector] = None
        self.evaluator = evaluator or TurnEvaluator(rng=self.random, delay_seconds=thinking_delay, sleep=sleep)
        self.start_delay = config.START_DELAY_SECONDS if start_delay is None else start_delay
        self.encore_delay = config.ENCORE_DELAY_SECONDS if encore_delay is None else encore_delay
        self.feedback_window = config.FEEDBACK_WINDOW_SECONDS if feedback_window is None else feedback_window
        self.sleep = sleep
        self.session = Session()
        self._generation: int = 0
        self._feedback_handle: Optional[asyncio.TimerHandle] = None

    def snapshot(self) -> SessionSnapshot:
        """Return the read-only view of the current session."""

        return self.session.snapshot()

    ########## Transitions ##########

    async def start_session(self, script_index: Optional[int] = None) -> Union[SessionSnapshot, StartFailure]:
        """Begin a fresh session on the chosen (or a random) script."""

        # 1 Reset to a loading Start session and pause for effect.             # steps
        # 2 Pick the script; failures leave the session in Start.              # steps
        # 3 Swap in the Playing session with the first turn presented.         # steps
        generation = self._begin_transition()
        self.session = Session(is_loading=True)
        if self.start_delay > 0:
            await self.sleep(self.start_delay)
        if generation != self._generation:
            log_run_event("start superseded before the curtain rose")
            return self.snapshot()
        try:
            script, index = self._ensure_selector().select(script_index)
            first = script.turns[0]
            opening = Session(
                phase=Phase.PLAYING,
                script=script,
                script_index=index,
                turn_index=1,
                turn_budget=config.INITIAL_MAX_TURNS,
                mood=config.INITIAL_MOOD,
                transcript=[TranscriptEntry(speaker=Speaker.LEAD, text=first.lead_line)],
                pending_options=shuffle_options(first.options, self.random),
            )
        except Exception as exc:  # any failure here must release the loading lock  # intent
            log_run_event(f"start failed: {type(exc).__name__}: {exc}")
            self.session = Session()
            return StartFailure(message=config.START_FAILURE_MESSAGE)
        self.session = opening
        log_run_event(f"session {self.session.session_id} start: '{script.topic}' (index {index})")
        return self.snapshot()

    async def submit_choice(self, option_text: str) -> SessionSnapshot:
        """Play the given response on the current turn."""

        # 1 Ignore input outside Playing or while a turn is being judged.      # steps
        # 2 Record the response and lock input during evaluation.              # steps
        # 3 Score, decide the next phase, and swap in the new session.         # steps
        current = self.session
        if current.phase != Phase.PLAYING or current.is_loading or not current.pending_options:
            log_run_event(f"choice ignored in phase={current.phase.value} loading={current.is_loading}")
            return self.snapshot()
        generation = self._begin_transition()
        waiting = current.model_copy(
            update={
                "transcript": current.transcript + [TranscriptEntry(speaker=Speaker.SUPPORT, text=option_text)],
                "pending_options": [],
                "is_loading": True,
                "last_feedback": None,
            }
        )
        self.session = waiting
        result = await self.evaluator.evaluate(waiting.script, waiting.turn_index, option_text)
        if generation != self._generation:
            log_run_event(f"evaluation for turn {waiting.turn_index} dropped, session moved on")
            return self.snapshot()

        delta = apply_scoring(result.outcome, waiting.mood, waiting.cheer_streak, waiting.boo_streak)
        cheer_score = waiting.cheer_score + delta.cheer_delta
        boo_score = waiting.boo_score + delta.boo_delta
        mood = clamp_mood(waiting.mood + delta.mood_delta)
        transcript: List[TranscriptEntry] = waiting.transcript + [
            TranscriptEntry(speaker=Speaker.LEAD, text=result.feedback, is_meta=True)
        ]
        if boo_score >= config.BOO_CEILING:
            phase, cause = Phase.GAME_OVER, "boo ceiling"
        elif result.is_game_over:
            phase, cause = Phase.GAME_OVER, "script exhausted"
        elif waiting.turn_index >= waiting.turn_budget:
            phase, cause = Phase.GAME_OVER, "turn budget"
        else:
            phase, cause = Phase.PLAYING, ""
        pending = []
        if phase == Phase.PLAYING:
            if result.next_lead_line:
                transcript.append(TranscriptEntry(speaker=Speaker.LEAD, text=result.next_lead_line))
            pending = list(result.next_options)
        label = feedback_label(delta.cheer_delta, delta.boo_delta, delta.new_cheer_streak, delta.new_boo_streak)
        self.session = waiting.model_copy(
            update={
                "phase": phase,
                "cheer_score": cheer_score,
                "boo_score": boo_score,
                "mood": mood,
                "transcript": transcript,
                "pending_options": pending,
                "turn_index": waiting.turn_index + 1,
                "cheer_streak": delta.new_cheer_streak,
                "boo_streak": delta.new_boo_streak,
                "is_loading": False,
                "last_feedback": label,
            }
        )
        log_run_event(
            f"turn {waiting.turn_index}: {result.outcome.value} cheer+{delta.cheer_delta} boo+{delta.boo_delta} "
            f"mood {waiting.mood}->{mood} score {cheer_score}/{boo_score}"
        )
        if phase == Phase.GAME_OVER:
            log_run_event(f"session {waiting.session_id} game over ({cause})")
        if label is not None:
            self._schedule_feedback_clear(generation)
        return self.snapshot()

    async def request_encore(self) -> EncoreResult:
        """Extend a finished, well-received show with more turns."""

        # 1 Refuse without touching state when not allowed or out of lines.   # steps
        # 2 Bow, raise the budget, reset mood, and return to Playing.          # steps
        # 3 After a pause, present the next authored turn.                     # steps
        current = self.session
        if current.phase != Phase.GAME_OVER:
            return EncoreResult(success=False, message=config.ENCORE_WRONG_PHASE_MESSAGE)
        if not can_encore(current.snapshot()):
            log_run_event(f"encore refused: {current.cheer_score} cheers / {current.boo_score} boos")
            return EncoreResult(success=False, message=config.ENCORE_NOT_EARNED_MESSAGE)
        next_turn = current.script.turn_at(current.turn_index) if current.script is not None else None
        if next_turn is None:
            log_run_event(f"encore refused: '{current.script.topic if current.script else '?'}' has no lines left")
            return EncoreResult(success=False, message=config.ENCORE_EXHAUSTED_MESSAGE)
        generation = self._begin_transition()
        bowing = current.model_copy(
            update={
                "phase": Phase.PLAYING,
                "turn_budget": current.turn_budget + config.ENCORE_TURNS_ADDED,
                "mood": config.ENCORE_MOOD,
                "is_loading": True,
                "pending_options": [],
                "last_feedback": None,
                "transcript": current.transcript
                + [TranscriptEntry(speaker=Speaker.LEAD, text=config.ENCORE_BOW_LINE, is_meta=True)],
            }
        )
        self.session = bowing
        log_run_event(f"session {bowing.session_id} encore: budget now {bowing.turn_budget}")
        if self.encore_delay > 0:
            await self.sleep(self.encore_delay)
        if generation != self._generation:
            log_run_event("encore continuation dropped, session moved on")
            return EncoreResult(success=True, snapshot=self.snapshot())
        self.session = bowing.model_copy(
            update={
                "is_loading": False,
                "transcript": bowing.transcript + [TranscriptEntry(speaker=Speaker.LEAD, text=next_turn.lead_line)],
                "pending_options": shuffle_options(next_turn.options, self.random),
            }
        )
        return EncoreResult(success=True, snapshot=self.snapshot())

    def quit_to_start(self) -> SessionSnapshot:
        """Discard the current session and return to a pristine Start."""

        self._begin_transition()
        if self.session.phase != Phase.START:
            log_run_event(f"session {self.session.session_id} quit at turn {self.session.turn_index}")
        self.session = Session()
        return self.snapshot()

    ########## Helpers ##########

    def _ensure_selector(self) -> ScriptSelector:
        """Build the selector on first use so load errors surface as start failures."""

        if self.selector is None:
            if self.repository is None:
                self.repository = default_repository()
            self.selector = ScriptSelector(self.repository, self.random)
        return self.selector

    def _begin_transition(self) -> int:
        """Invalidate pending continuations and timers; return the new generation."""

        self._generation += 1
        if self._feedback_handle is not None:
            self._feedback_handle.cancel()
            self._feedback_handle = None
        return self._generation

    def _schedule_feedback_clear(self, generation: int) -> None:
        """Clear the reaction banner after the display window."""

        loop = asyncio.get_running_loop()
        self._feedback_handle = loop.call_later(self.feedback_window, self._clear_feedback, generation)

    def _clear_feedback(self, generation: int) -> None:
        self._feedback_handle = None
        if generation != self._generation or self.session.last_feedback is None:
            return
        self.session = self.session.model_copy(update={"last_feedback": None})
