########## Script Repository Tests ##########
# Validates seed loading, authoring checks, and the script menu.

from __future__ import annotations

import json

import pytest

from crosstalk.core.scripts import ScriptConfigError, ScriptRepository, load_seed_scripts
from crosstalk.core.types import Option, Turn


def _turn_payload(**overrides) -> dict:
    payload = {
        "lead_line": "今天我请您吃饭！",
        "options": [{"id": label, "text": f"text {label}"} for label in "ABCD"],
        "best_id": "A",
        "worst_id": "D",
    }
    payload.update(overrides)
    return payload


def test_bundled_scripts_load_in_order(repository) -> None:
    """All seven authored scripts load, starting with the dish-listing routine."""

    assert len(repository) == 7
    assert repository.get(0).topic.startswith("报菜名")
    for script in repository.scripts:
        assert script.turns
        for turn in script.turns:
            ids = {option.id for option in turn.options}
            assert len(ids) == 4
            assert turn.best_id in ids and turn.worst_id in ids
            assert turn.best_id != turn.worst_id


def test_first_turn_of_first_script_matches_authored_content(repository) -> None:
    """The opening line and its best/worst picks come straight from the seed."""

    turn = repository.turns_for(0)[0]
    assert turn.lead_line == "今天我心情好，我请您吃饭！"
    assert turn.option_by_text("哎呦，那敢情好啊！").id == turn.best_id
    assert turn.option_by_text("你欠我钱还没还呢。").id == turn.worst_id


def test_turn_rejects_matching_best_and_worst() -> None:
    """Best and worst must be different options."""

    with pytest.raises(ValueError):
        Turn(**_turn_payload(worst_id="A"))


def test_turn_rejects_unknown_ids_and_wrong_option_count() -> None:
    """Ids must exist and there must be exactly four options."""

    with pytest.raises(ValueError):
        Turn(**_turn_payload(best_id="Z"))
    with pytest.raises(ValueError):
        Turn(**_turn_payload(options=[{"id": "A", "text": "a"}, {"id": "D", "text": "d"}]))
    with pytest.raises(ValueError):
        Turn(**_turn_payload(options=[{"id": "A", "text": t} for t in "abc"] + [{"id": "D", "text": "d"}]))


def test_empty_repository_is_a_configuration_error() -> None:
    """A repository without scripts cannot exist."""

    with pytest.raises(ScriptConfigError):
        ScriptRepository([])


def test_malformed_seed_file_raises_configuration_error(tmp_path) -> None:
    """Broken seeds are reported at load time, not during play."""

    (tmp_path / "script_01.json").write_text(
        json.dumps({"topic": "坏剧本", "turns": [_turn_payload(best_id="D")]}), encoding="utf-8"
    )
    with pytest.raises(ScriptConfigError):
        load_seed_scripts(tmp_path)
    (tmp_path / "script_01.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ScriptConfigError):
        load_seed_scripts(tmp_path)


def test_empty_seed_directory_yields_configuration_error(tmp_path) -> None:
    """No seed files means no repository."""

    with pytest.raises(ScriptConfigError):
        ScriptRepository.from_seeds(tmp_path)


def test_catalogue_splits_topic_into_title_and_subtitle(repository, make_script) -> None:
    """Menu rows carry the title before the parenthesis and the subtitle inside it."""

    rows = repository.catalogue()
    assert rows[0] == (0, "报菜名", "贯口练习")
    bare = ScriptRepository([make_script(topic="单口")])
    assert bare.catalogue() == [(0, "单口", "Classic")]


def test_get_out_of_range_raises_index_error(repository) -> None:
    with pytest.raises(IndexError):
        repository.get(len(repository))


def test_option_by_text_returns_none_for_unknown_text() -> None:
    turn = Turn(**_turn_payload())
    assert turn.option_by_text("nothing like this") is None
    assert turn.option_by_text("text B") == Option(id="B", text="text B")


def test_seed_that_is_not_an_object_raises_configuration_error(tmp_path) -> None:
    """A seed holding a JSON list is rejected before model validation."""

    (tmp_path / "script_01.json").write_bytes(b"[1, 2]")
    with pytest.raises(ScriptConfigError, match="expected a JSON object"):
        load_seed_scripts(tmp_path)


def test_seed_with_invalid_utf8_raises_configuration_error(tmp_path) -> None:
    (tmp_path / "script_01.json").write_bytes(b'{"topic": "\xff\xfe"}')
    with pytest.raises(ScriptConfigError, match="not UTF-8"):
        load_seed_scripts(tmp_path)
