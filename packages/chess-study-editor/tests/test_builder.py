import pytest

from chess_move_tree import STARTING_FEN, PythonChessOracle, load_position_from_path
from chess_study_editor import StudyTreeBuilder


PGN = """[Event "Demo"]
[Opening "King's Pawn Game"]
[ECO "C20"]

1. e4 (1. d4 d5) e5 2. Nf3 (2. f4 {King's gambit}) Nc6 *
"""


def sans(sequence):
    return [n["move"]["san"] for n in sequence]


def test_builder_maps_variations_onto_branches():
    state = StudyTreeBuilder().build(PGN)

    assert sans(state["moveTree"]) == ["e4", "e5", "Nf3", "Nc6"]
    assert [sans(b) for b in state["rootBranches"]] == [["d4", "d5"]]
    assert [sans(b) for b in state["moveTree"][1]["branches"]] == [["f4"]]
    assert state["moveTree"][0]["branches"] == []
    assert state["comments"] == {"1-0-0": "King's gambit"}
    assert state["opening"] == {"name": "King's Pawn Game", "eco": "C20"}
    assert state["currentPath"] == []
    assert state["startingPosition"] == STARTING_FEN


def test_built_study_replays_every_line():
    state = StudyTreeBuilder().build(PGN)
    oracle = PythonChessOracle()
    tree, root_branches = state["moveTree"], state["rootBranches"]

    assert load_position_from_path(oracle, tree, root_branches, [1, 0, 0]) == tree[1]["branches"][0][0]["move"]["after"]
    assert load_position_from_path(oracle, tree, root_branches, [-1, 0, 1]) == root_branches[0][1]["move"]["after"]
    assert load_position_from_path(oracle, tree, root_branches, [3]) == tree[3]["move"]["after"]


def test_builder_keeps_setup_position():
    fen = "4k3/8/8/8/8/8/4P3/4K3 w - - 0 1"
    pgn = f'[SetUp "1"]\n[FEN "{fen}"]\n\n1. e4 Kd7 *\n'
    state = StudyTreeBuilder().build(pgn)
    assert state["startingPosition"] == fen
    assert state["moveTree"][0]["move"]["before"] == fen


def test_builder_rejects_empty_pgn():
    with pytest.raises(ValueError, match="no game found"):
        StudyTreeBuilder().build("")


def test_builder_rejects_illegal_moves():
    with pytest.raises(ValueError, match="PGN"):
        StudyTreeBuilder().build("1. e4 e4 *\n")
