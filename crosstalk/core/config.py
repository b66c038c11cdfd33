from __future__ import annotations
import os
from pathlib import Path
from typing import List, Optional

########## Core Config ##########
# Houses runtime constants for the CrossTalk stage engine.

########## Variable Controls ##########
# All tweakable knobs live here so you can tune the show without code changes.

# Game rules
BOO_CEILING: int = 3  # game over once boos reach this
INITIAL_MAX_TURNS: int = 12
ENCORE_THRESHOLD: int = 15  # cheers needed before the crowd calls for more
ENCORE_MAX_BOOS: int = 2  # encore only while boos stay below this
ENCORE_TURNS_ADDED: int = 6

# Audience mood
MOOD_MIN: int = 0
MOOD_MAX: int = 100
INITIAL_MOOD: int = 50
ENCORE_MOOD: int = 100

# Scoring knobs
CHEER_MOOD_GAIN: int = 10
CHEER_STREAK_MOOD_STEP: int = 3
HOT_CROWD_MOOD: int = 80  # bonus cheer at or above this mood
HOT_CROWD_MOOD_DAMPING: int = 5
HOT_CROWD_MIN_GAIN: int = 5
BOO_MOOD_LOSS: int = 15
BOO_STREAK_MOOD_STEP: int = 5
COLD_CROWD_MOOD: int = 30
FROZEN_CROWD_MOOD: int = 20  # extra boo strictly below this
NEUTRAL_MOOD_PIVOT: int = 50  # neutral answers drift mood toward this
NEUTRAL_COOLING: int = 3
NEUTRAL_WARMING: int = 2

# Pacing (seconds); set the env vars to 0 for instant play
START_DELAY_SECONDS: float = float(os.getenv("CROSSTALK_START_DELAY", "0.6"))
THINKING_DELAY_SECONDS: float = float(os.getenv("CROSSTALK_THINKING_DELAY", "0.8"))
ENCORE_DELAY_SECONDS: float = 1.0
FEEDBACK_WINDOW_SECONDS: float = 2.5

RANDOM_SEED: Optional[int] = None

# Script content
SEED_DIR: Path = Path(__file__).resolve().parent / "seeds"
SEED_GLOB: str = "script_*.json"

# Audience reactions per outcome
BEST_FEEDBACK: List[str] = ["好！接得严丝合缝！", "漂亮！这就叫尺寸！", "好！这包袱翻得脆！", "对咯！要的就是这句！"]
WORST_FEEDBACK: List[str] = ["这都哪跟哪啊！", "这句不行，掉地上了。", "胡说八道嘛这不是！", "您这是来捣乱的吧？"]
NEUTRAL_FEEDBACK: List[str] = ["也行吧。", "凑合听。", "稍微差点意思。", "没毛病，但不响。"]
CLOSING_FEEDBACK: str = "演出结束"

# Stage copy
ENCORE_BOW_LINE: str = "（擦把汗，鞠躬）感谢大伙儿的厚爱！既然各位不想走，那咱们就——再多聊两句！"
ENCORE_EXHAUSTED_MESSAGE: str = "老先生累了，这回是真没词儿了！（离线剧本已全部演完）"
ENCORE_NOT_EARNED_MESSAGE: str = "观众还没喊返场呢，再接再厉！"
ENCORE_WRONG_PHASE_MESSAGE: str = "演出还没结束，返场从何谈起？"
START_FAILURE_MESSAGE: str = "启动失败，请刷新重试"
CHEER_LABEL: str = "喝彩"
BOO_LABEL: str = "倒彩"

# Logging and debug
DEBUG_VERBOSE: bool = False  # mirror run log lines into the in-memory buffer
DEBUG_LOG_MAX_LINES: int = 200  # cap on the in-memory buffer
LOG_TEXT_ENABLED: bool = True  # toggle human-readable run log
LOG_TEXT_DIR: str = "logs"
LOG_TEXT_FILENAME: str = "crosstalk.log"
LOG_TEXT_MAX_LINES: int = 800

# Demo export
DEFAULT_TRANSCRIPT_EXPORT: str = "crosstalk/demo/run_logs"
DEFAULT_TRANSCRIPT_FILENAME_TEMPLATE: str = "show_{timestamp}.jsonl"
