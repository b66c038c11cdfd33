########## Script Repository ##########
# Loads the authored cross-talk scripts and serves them read-only.

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from . import config
from .types import Script, Turn


class ScriptConfigError(ValueError):
    """Raised when script content is missing or malformed."""


def load_seed_scripts(seed_dir: Optional[Path] = None) -> List[Script]:
    """Load scripts from seed JSON files in filename order."""

    # 1 Walk the seed directory and parse each file.                           # steps
    # 2 Turn decoding and validation failures into configuration errors.       # steps
    directory = seed_dir or config.SEED_DIR
    scripts: List[Script] = []
    for path in sorted(Path(directory).glob(config.SEED_GLOB)):
        try:
            with path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except UnicodeDecodeError as exc:
            raise ScriptConfigError(f"{path.name}: not UTF-8 ({exc})") from exc
        except json.JSONDecodeError as exc:
            raise ScriptConfigError(f"{path.name}: invalid JSON ({exc})") from exc
        if not isinstance(raw, dict):
            raise ScriptConfigError(f"{path.name}: expected a JSON object, got {type(raw).__name__}")
        try:
            scripts.append(Script(**raw))
        except ValidationError as exc:
            raise ScriptConfigError(f"{path.name}: {exc}") from exc
    return scripts


class ScriptRepository:
    """Immutable, ordered catalogue of scripts identified by position."""

    def __init__(self, scripts: Iterable[Script]) -> None:
        self._scripts: Tuple[Script, ...] = tuple(scripts)
        if not self._scripts:
            raise ScriptConfigError("script repository is empty")

    @classmethod
    def from_seeds(cls, seed_dir: Optional[Path] = None) -> "ScriptRepository":
        """Build a repository from the bundled (or given) seed directory."""

        return cls(load_seed_scripts(seed_dir))

    def __len__(self) -> int:
        return len(self._scripts)

    @property
    def scripts(self) -> Tuple[Script, ...]:
        return self._scripts

    def get(self, index: int) -> Script:
        """Return the script at index; IndexError when out of range."""

        if index < 0 or index >= len(self._scripts):
            raise IndexError(f"no script at index {index}")
        return self._scripts[index]

    def turns_for(self, index: int) -> Sequence[Turn]:
        """Return the ordered turns of the script at index."""

        return self.get(index).turns

    def catalogue(self) -> List[Tuple[int, str, str]]:
        """Return (index, title, subtitle) rows for a script menu."""

        rows: List[Tuple[int, str, str]] = []
        for index, script in enumerate(self._scripts):
            title, _, rest = script.topic.partition("(")
            subtitle = rest.replace(")", "").strip() or "Classic"
            rows.append((index, title.strip(), subtitle))
        return rows


_DEFAULT_REPOSITORY: Optional[ScriptRepository] = None


def default_repository() -> ScriptRepository:
    """Load the bundled scripts once per process."""

    global _DEFAULT_REPOSITORY
    if _DEFAULT_REPOSITORY is None:
        _DEFAULT_REPOSITORY = ScriptRepository.from_seeds()
    return _DEFAULT_REPOSITORY
