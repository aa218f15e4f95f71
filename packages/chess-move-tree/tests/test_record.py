import pytest

from chess_move_tree import (
    STARTING_FEN,
    dump_game_state,
    load_game_state,
    new_game_state,
    validate_game_state,
)


def node(san, *branches):
    return {"move": {"from": "a1", "to": "a2", "san": san}, "branches": [list(b) for b in branches]}


def study():
    state = new_game_state()
    state["moveTree"] = [node("e4", [node("c5")]), node("e5")]
    state["rootBranches"] = [[node("d4")]]
    state["currentPath"] = [0, 0, 0]
    state["comments"] = {"0-0-0": "Sicilian", "-1-0-0": "Queen's pawn"}
    state["opening"] = {"name": "King's Pawn Game", "eco": "C20"}
    return state


def test_new_game_state_defaults():
    state = new_game_state()
    assert state["position"] == STARTING_FEN
    assert state["startingPosition"] == STARTING_FEN
    assert state["moveTree"] == []
    assert state["rootBranches"] == []
    assert state["currentPath"] == []
    assert state["isFlipped"] is False
    assert state["comments"] == {}
    validate_game_state(state)


def test_dump_and_load_preserve_record():
    state = study()
    text = dump_game_state(state)
    assert "Queen's pawn" in text
    assert load_game_state(text) == state


def test_load_fills_missing_starting_position():
    state = study()
    del state["startingPosition"]
    loaded = load_game_state(dump_game_state(state))
    assert loaded["startingPosition"] == loaded["position"]


def test_load_rejects_invalid_json():
    with pytest.raises(ValueError, match="invalid JSON"):
        load_game_state("{not json")


@pytest.mark.parametrize(
    ("mutate", "message"),
    [
        (lambda s: s.pop("moveTree"), "missing required key 'moveTree'"),
        (lambda s: s.update(position=""), "StudyGameState.position"),
        (lambda s: s.update(isFlipped="no"), "StudyGameState.isFlipped"),
        (lambda s: s["rootBranches"].append([]), r"StudyGameState.rootBranches\[1\]"),
        (lambda s: s["moveTree"][0]["branches"].append([]), r"moveTree\[0\].branches\[1\]"),
        (lambda s: s["moveTree"][1]["move"].update(san=""), r"moveTree\[1\].move.san"),
        (lambda s: s.update(currentPath=[0, 0]), "malformed path"),
        (lambda s: s.update(currentPath=[0, 2, 0]), "does not resolve"),
        (lambda s: s["comments"].update({"x-y": "?"}), "Invalid path key"),
        (lambda s: s["comments"].update({"01": "?"}), "non-canonical key"),
        (lambda s: s.update(opening={"name": "Italian"}), "StudyGameState.opening"),
    ],
)
def test_validate_game_state_rejects(mutate, message):
    state = study()
    mutate(state)
    with pytest.raises(ValueError, match=message):
        validate_game_state(state)


def test_validate_rejects_non_mapping():
    with pytest.raises(ValueError, match="expected a mapping"):
        validate_game_state([])
