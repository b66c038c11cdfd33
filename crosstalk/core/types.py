########## Core Types ##########
# Pydantic models and enums that describe CrossTalk scripts and sessions.

from __future__ import annotations

import uuid
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from . import config

OPTIONS_PER_TURN: int = 4


class Phase(str, Enum):
    """Phase enumerates the screens a session moves through."""

    START = "start"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class Speaker(str, Enum):
    """Speaker marks who said a transcript line; the player is always SUPPORT."""

    LEAD = "lead"
    SUPPORT = "support"


class Outcome(str, Enum):
    """Outcome classifies a submitted response against the authored turn."""

    BEST = "best"
    WORST = "worst"
    NEUTRAL = "neutral"


########## Script Content ##########
# Immutable authored data loaded once from the seed files.


class Option(BaseModel):
    """Single labelled response the player may pick."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str


class Turn(BaseModel):
    """One exchange: a lead line plus four options with a best and worst pick."""

    model_config = ConfigDict(frozen=True)

    lead_line: str
    options: Tuple[Option, ...]
    best_id: str
    worst_id: str

    @model_validator(mode="after")
    def _check_authoring(self) -> "Turn":
        # 1 Exactly four options with unique ids.                              # steps
        # 2 Best and worst must point at real options and differ.              # steps
        ids = [option.id for option in self.options]
        if len(ids) != OPTIONS_PER_TURN:
            raise ValueError(f"turn needs {OPTIONS_PER_TURN} options, got {len(ids)}")
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate option ids in turn: {ids}")
        if self.best_id not in ids or self.worst_id not in ids:
            raise ValueError(f"best/worst ids {self.best_id}/{self.worst_id} not among {ids}")
        if self.best_id == self.worst_id:
            raise ValueError("best and worst option must differ")
        return self

    def option_by_text(self, text: str) -> Optional[Option]:
        """Return the first option whose display text matches exactly."""

        for option in self.options:
            if option.text == text:
                return option
        return None


class Script(BaseModel):
    """A topic and its ordered turns."""

    model_config = ConfigDict(frozen=True)

    topic: str
    turns: Tuple[Turn, ...]

    @model_validator(mode="after")
    def _require_turns(self) -> "Script":
        if not self.turns:
            raise ValueError(f"script '{self.topic}' has no turns")
        return self

    def turn_at(self, turn_index: int) -> Optional[Turn]:
        """Look up a turn by its 1-based index, None past the end."""

        if turn_index < 1 or turn_index > len(self.turns):
            return None
        return self.turns[turn_index - 1]


class FeedbackPools(BaseModel):
    """Reaction lines sampled per outcome class."""

    best: List[str] = Field(default_factory=lambda: list(config.BEST_FEEDBACK))
    worst: List[str] = Field(default_factory=lambda: list(config.WORST_FEEDBACK))
    neutral: List[str] = Field(default_factory=lambda: list(config.NEUTRAL_FEEDBACK))
    closing: str = config.CLOSING_FEEDBACK

    @model_validator(mode="after")
    def _require_lines(self) -> "FeedbackPools":
        for name in ("best", "worst", "neutral"):
            if not getattr(self, name):
                raise ValueError(f"feedback pool '{name}' is empty")
        return self

    def pool_for(self, outcome: Outcome) -> List[str]:
        """Return the lines for the given outcome."""

        if outcome == Outcome.BEST:
            return self.best
        if outcome == Outcome.WORST:
            return self.worst
        return self.neutral


########## Turn Results ##########
# Values passed between the evaluator, the scoring policy, and the engine.


class EvaluationResult(BaseModel):
    """What the evaluator reports for one submitted response."""

    outcome: Outcome
    chosen_option_id: Optional[str] = None
    cheer_impact: int = 0
    boo_impact: int = 0
    feedback: str
    has_next_turn: bool
    is_game_over: bool
    next_lead_line: Optional[str] = None
    next_options: List[Option] = Field(default_factory=list)


class ScoreDelta(BaseModel):
    """Scoring policy output for a single outcome."""

    model_config = ConfigDict(frozen=True)

    cheer_delta: int = 0
    boo_delta: int = 0
    mood_delta: int = 0
    new_cheer_streak: int = 0
    new_boo_streak: int = 0


########## Session State ##########
# The mutable aggregate owned by the stage engine and its read-only projection.


class TranscriptEntry(BaseModel):
    """One line of the show; meta entries carry audience reactions."""

    model_config = ConfigDict(frozen=True)

    speaker: Speaker
    text: str
    is_meta: bool = False


class Session(BaseModel):
    """Full state of one performance; replaced wholesale on every transition."""

    session_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    phase: Phase = Phase.START
    script: Optional[Script] = None
    script_index: Optional[int] = None
    cheer_score: int = 0
    boo_score: int = 0
    mood: int = config.INITIAL_MOOD
    transcript: List[TranscriptEntry] = Field(default_factory=list)
    pending_options: List[Option] = Field(default_factory=list)
    turn_index: int = 0
    turn_budget: int = config.INITIAL_MAX_TURNS
    cheer_streak: int = 0
    boo_streak: int = 0
    is_loading: bool = False
    last_feedback: Optional[str] = None

    def snapshot(self) -> "SessionSnapshot":
        """Return the read-only projection handed to presentation layers."""

        return SessionSnapshot(
            session_id=self.session_id,
            phase=self.phase,
            topic=self.script.topic if self.script is not None else None,
            script_index=self.script_index,
            cheer_score=self.cheer_score,
            boo_score=self.boo_score,
            mood=self.mood,
            transcript=tuple(self.transcript),
            pending_options=tuple(self.pending_options),
            turn_index=self.turn_index,
            turn_budget=self.turn_budget,
            cheer_streak=self.cheer_streak,
            boo_streak=self.boo_streak,
            is_loading=self.is_loading,
            last_feedback=self.last_feedback,
        )


class SessionSnapshot(BaseModel):
    """Everything a screen needs to render the current moment."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    phase: Phase
    topic: Optional[str] = None
    script_index: Optional[int] = None
    cheer_score: int
    boo_score: int
    mood: int
    transcript: Tuple[TranscriptEntry, ...] = ()
    pending_options: Tuple[Option, ...] = ()
    turn_index: int
    turn_budget: int
    cheer_streak: int
    boo_streak: int
    is_loading: bool = False
    last_feedback: Optional[str] = None


class StartFailure(BaseModel):
    """Returned instead of a snapshot when a session could not be started."""

    message: str


class EncoreResult(BaseModel):
    """Outcome of an encore request; snapshot is only set on success."""

    success: bool
    message: Optional[str] = None
    snapshot: Optional[SessionSnapshot] = None
