########## Shared Fixtures ##########
# Zero-delay engines over the bundled scripts, with run logs kept out of the repo.

from __future__ import annotations

import random
from typing import Callable, List

import pytest

from crosstalk.core import config
from crosstalk.core.scripts import ScriptRepository
from crosstalk.core.session import StageEngine
from crosstalk.core.types import Option, Script, Turn


@pytest.fixture(autouse=True)
def _isolated_run_log(tmp_path, monkeypatch) -> None:
    """Send run log lines into the test's temp directory."""

    monkeypatch.setattr(config, "LOG_TEXT_DIR", str(tmp_path / "logs"))


@pytest.fixture(scope="session")
def repository() -> ScriptRepository:
    return ScriptRepository.from_seeds()


@pytest.fixture
def make_engine(repository) -> Callable[..., StageEngine]:
    """Factory for engines with no pauses and a seeded random source."""

    def _factory(repo: ScriptRepository | None = None, seed: int = 7, **overrides) -> StageEngine:
        params = {"start_delay": 0, "thinking_delay": 0, "encore_delay": 0}
        params.update(overrides)
        return StageEngine(repository=repo or repository, rng=random.Random(seed), **params)

    return _factory


def _build_turn(lead_line: str, best: str = "A", worst: str = "D") -> Turn:
    """Turn with options A..D whose texts are '<lead_line>/<id>'."""

    options: List[Option] = [Option(id=label, text=f"{lead_line}/{label}") for label in "ABCD"]
    return Turn(lead_line=lead_line, options=tuple(options), best_id=best, worst_id=worst)


def build_script(topic: str = "短段 (Test)", turns: int = 3) -> Script:
    return Script(topic=topic, turns=tuple(_build_turn(f"line {index}") for index in range(1, turns + 1)))


@pytest.fixture
def make_script() -> Callable[..., Script]:
    """Factory for small synthetic scripts: best is always A, worst always D."""

    return build_script
