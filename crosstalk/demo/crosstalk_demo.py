########## Demo Runner ##########
# Plays shows against the stage engine from the console and exports transcripts.

from __future__ import annotations

import asyncio
import json
import random
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..core import config
from ..core.curtain import SPEAKER_LABELS, mood_band, results_payload
from ..core.session import StageEngine
from ..core.types import Option, Phase, SessionSnapshot, StartFailure

STRATEGIES = ("best", "worst", "random")


def build_demo_engine(seed: Optional[int] = None, instant: bool = True) -> StageEngine:
    """Create an engine over the bundled scripts, optionally without pauses."""

    # 1 Zero every delay for scripted runs.                                    # steps
    rng = random.Random(seed if seed is not None else config.RANDOM_SEED)
    if instant:
        return StageEngine(rng=rng, start_delay=0, thinking_delay=0, encore_delay=0)
    return StageEngine(rng=rng)


def _pick(engine: StageEngine, strategy: str, rng: random.Random) -> Option:
    """Choose an option from the pending list for the given strategy."""

    session = engine.session
    options = list(session.pending_options)
    turn = session.script.turn_at(session.turn_index) if session.script else None
    if turn is not None and strategy in ("best", "worst"):
        wanted = turn.best_id if strategy == "best" else turn.worst_id
        for option in options:
            if option.id == wanted:
                return option
    return rng.choice(options)


async def play_show(
    engine: StageEngine,
    strategy: str = "best",
    script_index: Optional[int] = None,
    take_encores: bool = True,
) -> SessionSnapshot:
    """Auto-play one show to the curtain, taking encores when offered."""

    # 1 Start, then answer turns until the show ends.                          # steps
    # 2 Accept encores while the crowd asks and the script has lines.          # steps
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown strategy '{strategy}', expected one of {STRATEGIES}")
    started = await engine.start_session(script_index)
    if isinstance(started, StartFailure):
        raise RuntimeError(started.message)
    rng = random.Random(config.RANDOM_SEED)
    while True:
        while engine.session.phase == Phase.PLAYING and engine.session.pending_options:
            choice = _pick(engine, strategy, rng)
            await engine.submit_choice(choice.text)
        if not take_encores:
            break
        encore = await engine.request_encore()
        if not encore.success:
            break
    return engine.snapshot()


def export_transcript(snapshot: SessionSnapshot) -> Path:
    """Persist the transcript to JSONL for quick inspection."""

    # 1 Ensure export directory exists.                                        # steps
    export_dir = Path(config.DEFAULT_TRANSCRIPT_EXPORT)
    export_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    file_path = export_dir / config.DEFAULT_TRANSCRIPT_FILENAME_TEMPLATE.format(timestamp=timestamp)
    with file_path.open("w", encoding="utf-8") as handle:
        for entry in snapshot.transcript:
            payload = {
                "topic": snapshot.topic,
                "speaker": entry.speaker.value,
                "text": entry.text,
                "is_meta": entry.is_meta,
            }
            handle.write(json.dumps(payload, ensure_ascii=False) + "\n")
    return file_path


def run_demo(strategy: str = "best", script_index: Optional[int] = None) -> SessionSnapshot:
    """Run one scripted show and export its transcript."""

    engine = build_demo_engine()
    snapshot = asyncio.run(play_show(engine, strategy, script_index))
    export_transcript(snapshot)
    return snapshot


########## Console Play ##########
# Minimal text front end; rendering stays out of the engine.


def _render(snapshot: SessionSnapshot, shown: int) -> int:
    """Print transcript lines not yet shown plus the scoreboard."""

    for entry in snapshot.transcript[shown:]:
        prefix = "  *" if entry.is_meta else SPEAKER_LABELS[entry.speaker]
        print(f"{prefix}：{entry.text}")
    print(
        f"[第 {snapshot.turn_index} / {snapshot.turn_budget} 回合] 喝彩 {snapshot.cheer_score} "
        f"倒彩 {snapshot.boo_score}/{config.BOO_CEILING} 情绪 {snapshot.mood} ({mood_band(snapshot.mood)})"
    )
    return len(snapshot.transcript)


async def _console_show(engine: StageEngine) -> None:
    """Interactive loop: pick options by number, q to quit."""

    started = await engine.start_session()
    if isinstance(started, StartFailure):
        print(started.message)
        return
    print(f"== {started.topic} ==")
    shown = _render(started, 0)
    while True:
        snapshot = engine.snapshot()
        if snapshot.phase == Phase.PLAYING and snapshot.pending_options:
            for number, option in enumerate(snapshot.pending_options, start=1):
                print(f"  {number}. {option.text}")
            raw = input("> ").strip()
            if raw.lower() == "q":
                engine.quit_to_start()
                return
            if not raw.isdigit() or not 1 <= int(raw) <= len(snapshot.pending_options):
                continue
            after = await engine.submit_choice(snapshot.pending_options[int(raw) - 1].text)
            if after.last_feedback:
                print(f"  【{after.last_feedback}】")
            shown = _render(after, shown)
            continue
        results = results_payload(snapshot)
        print(f"\n{results['rank']}：{results['rank_description']}\n{results['summary']}")
        if not results["can_encore"] or input("返场？(y/n) ").strip().lower() != "y":
            return
        encore = await engine.request_encore()
        if not encore.success:
            print(encore.message)
            return
        shown = _render(encore.snapshot, shown)


def main() -> None:
    """Entry point when running the demo script directly."""

    asyncio.run(_console_show(build_demo_engine(instant=False)))


if __name__ == "__main__":
    main()
