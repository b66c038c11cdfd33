########## Shuffle and Selection Tests ##########
# Confirms option shuffling keeps identity and script picks avoid repeats.

from __future__ import annotations

import random

import pytest

from crosstalk.core.randomizer import shuffle_options
from crosstalk.core.scripts import ScriptConfigError, ScriptRepository
from crosstalk.core.selector import ScriptSelector


def test_shuffle_is_a_permutation_and_leaves_input_alone(repository) -> None:
    """Every shuffle of every turn keeps the same four options."""

    rng = random.Random(3)
    for script in repository.scripts:
        for turn in script.turns:
            original = list(turn.options)
            shuffled = shuffle_options(original, rng)
            assert len(shuffled) == 4
            assert sorted(shuffled, key=lambda option: option.id) == sorted(original, key=lambda option: option.id)
            assert original == list(turn.options)


def test_shuffle_produces_varied_orders(repository) -> None:
    """Repeated shuffles of one turn do not always give the same order."""

    rng = random.Random(11)
    options = repository.turns_for(0)[0].options
    orders = {tuple(option.id for option in shuffle_options(options, rng)) for _ in range(50)}
    assert len(orders) > 1


def test_explicit_index_is_deterministic(repository) -> None:
    """An in-range index always returns that script and is remembered."""

    selector = ScriptSelector(repository, random.Random(1))
    for _ in range(3):
        script, index = selector.select(2)
        assert index == 2
        assert script == repository.get(2)
    assert selector.last_selected_index == 2


def test_random_pick_never_repeats_immediately(repository) -> None:
    """Consecutive random picks always differ when several scripts exist."""

    selector = ScriptSelector(repository, random.Random(5))
    previous = None
    for _ in range(200):
        _, index = selector.select()
        assert index != previous
        assert 0 <= index < len(repository)
        previous = index


def test_out_of_range_index_falls_back_to_random(repository) -> None:
    """Bad explicit indexes are treated like no index at all."""

    selector = ScriptSelector(repository, random.Random(9))
    selector.select(0)
    _, index = selector.select(99)
    assert index != 0
    _, index = selector.select(-1)
    assert 0 <= index < len(repository)


def test_single_script_is_always_returned(make_script) -> None:
    """With one script there is nothing to rotate through."""

    selector = ScriptSelector(ScriptRepository([make_script()]), random.Random(2))
    assert [selector.select()[1] for _ in range(5)] == [0, 0, 0, 0, 0]


def test_selector_refuses_empty_repository(repository) -> None:
    """An emptied repository surfaces as a configuration error."""

    class _Empty(ScriptRepository):
        def __init__(self) -> None:
            self._scripts = ()

    with pytest.raises(ScriptConfigError):
        ScriptSelector(_Empty()).select()
