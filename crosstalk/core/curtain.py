########## Curtain Call ##########
# Read-only verdicts and texts derived from a session snapshot.

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from . import config
from .types import SessionSnapshot, Speaker, TranscriptEntry

SPEAKER_LABELS: Dict[Speaker, str] = {
    Speaker.LEAD: "逗哏",
    Speaker.SUPPORT: "捧哏",
}

# (cheer ceiling, title, description); the last row catches everything above
RANKS: Tuple[Tuple[Optional[int], str, str], ...] = (
    (5, "相声学徒", "刚入门，还得练练嘴皮子！"),
    (10, "小有名气", "不错，能在这四九城混口饭吃！"),
    (18, "德云台柱", "好家伙，您就是未来的相声大师！"),
    (None, "一代宗师", "前无古人，后无来者，您就是传说！"),
)

ENCORE_SUMMARY = "太棒了！您的表演惊艳四座，观众久久不愿离去，强烈要求返场！您要再来一段吗？"
LOSS_SUMMARY = "这一场演砸了！观众把瓜子皮都扔台上了。回去再练练嘴皮子吧！"
WIN_SUMMARIES: Tuple[Tuple[Optional[int], str], ...] = (
    (5, "您这捧得...怎么说呢，没让观众睡着就算成功。离“严丝合缝”还差着二里地呢，还得勤练呐！"),
    (10, "有来有回，像模像样。虽说没那么多炸裂的包袱，但也没让话掉地上。观众听个乐呵，但也记得住您这号人物了。"),
    (18, "这尺寸拿捏得死死的！翻包袱干脆利落，观众的手都拍红了，期待您下场演出！"),
    (None, "神了！您这反应比电脑都快。哪怕逗哏的是个哑巴，您都能给捧出花儿来！"),
)

MOOD_BANDS: Tuple[Tuple[int, str], ...] = (
    (85, "火爆"),
    (60, "热烈"),
    (30, "平稳"),
    (config.MOOD_MIN, "冷场"),
)


def is_win(snapshot: SessionSnapshot) -> bool:
    """The show counts as a win unless the boo ceiling was reached."""

    return snapshot.boo_score < config.BOO_CEILING


def can_encore(snapshot: SessionSnapshot) -> bool:
    """Whether the crowd is calling for an encore."""

    return snapshot.cheer_score >= config.ENCORE_THRESHOLD and snapshot.boo_score < config.ENCORE_MAX_BOOS


def rank_for(cheer_score: int) -> Tuple[str, str]:
    """Return (title, description) for a final cheer count."""

    for ceiling, title, description in RANKS:
        if ceiling is None or cheer_score < ceiling:
            return title, description
    return RANKS[-1][1], RANKS[-1][2]


def summary_text(snapshot: SessionSnapshot) -> str:
    """Pick the closing paragraph shown on the curtain-call screen."""

    if can_encore(snapshot):
        return ENCORE_SUMMARY
    if not is_win(snapshot):
        return LOSS_SUMMARY
    for ceiling, text in WIN_SUMMARIES:
        if ceiling is None or snapshot.cheer_score < ceiling:
            return text
    return WIN_SUMMARIES[-1][1]


def mood_band(mood: int) -> str:
    """Name the audience mood band for a gauge value."""

    for floor, label in MOOD_BANDS:
        if mood >= floor:
            return label
    return MOOD_BANDS[-1][1]


def feedback_label(cheer_gain: int, boo_gain: int, cheer_streak: int, boo_streak: int) -> Optional[str]:
    """Short banner text for the last reaction; boos win over cheers."""

    if boo_gain > 0:
        label = config.BOO_LABEL
        if boo_streak > 1:
            label += f" x{boo_streak}"
        return label
    if cheer_gain > 0:
        label = config.CHEER_LABEL
        if cheer_streak > 1:
            label += f" x{cheer_streak}"
        return label
    return None


def render_script(transcript: Iterable[TranscriptEntry]) -> str:
    """Plain-text script of the show without audience reactions."""

    lines = [
        f"{SPEAKER_LABELS[entry.speaker]}：{entry.text}"
        for entry in transcript
        if not entry.is_meta
    ]
    return "\n\n".join(lines)


def results_payload(snapshot: SessionSnapshot) -> Dict[str, object]:
    """Bundle the curtain-call verdicts for API and console consumers."""

    title, description = rank_for(snapshot.cheer_score)
    return {
        "is_win": is_win(snapshot),
        "can_encore": can_encore(snapshot),
        "rank": title,
        "rank_description": description,
        "summary": summary_text(snapshot),
        "mood_band": mood_band(snapshot.mood),
        "script": render_script(snapshot.transcript),
    }
