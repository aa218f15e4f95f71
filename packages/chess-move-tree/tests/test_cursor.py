import pytest

from chess_move_tree import (
    continuation_matches,
    find_matching_branch_at_path,
    get_continuation_path,
    get_last_path_in_line,
    get_next_path,
    get_previous_path,
    is_at_end_of_path,
)


def mv(san, frm="a1", to="a2", promotion=None):
    move = {"from": frm, "to": to, "san": san}
    if promotion:
        move["promotion"] = promotion
    return move


def node(move, *branches):
    return {"move": move, "branches": [list(b) for b in branches]}


def sample():
    # 1. e4 e5 2. Nf3, with (c5 Nc3) stored on e4 and root variation (d4)
    tree = [
        node(mv("e4", "e2", "e4"), [node(mv("c5", "c7", "c5")), node(mv("Nc3", "b1", "c3"))]),
        node(mv("e5", "e7", "e5")),
        node(mv("Nf3", "g1", "f3")),
    ]
    root_branches = [[node(mv("d4", "d2", "d4"))]]
    return tree, root_branches


@pytest.mark.parametrize(
    ("path", "expected"),
    [([2], True), ([1], False), ([0, 0, 1], True), ([0, 0, 0], False), ([-1, 0, 0], True), ([], False), ([7], False)],
)
def test_is_at_end_of_path(path, expected):
    tree, root_branches = sample()
    assert is_at_end_of_path(tree, root_branches, path) is expected


def test_is_at_end_of_path_on_empty_study():
    assert is_at_end_of_path([], [], [])


def test_get_continuation_path():
    tree, root_branches = sample()
    assert get_continuation_path(tree, root_branches, []) == [0]
    assert get_continuation_path(tree, root_branches, [0]) == [1]
    assert get_continuation_path(tree, root_branches, [2]) is None
    assert get_continuation_path(tree, root_branches, [0, 0, 0]) == [0, 0, 1]
    assert get_continuation_path(tree, root_branches, [0, 0, 1]) is None
    assert get_continuation_path([], [], []) is None


def test_get_next_path_enters_branches_at_line_end():
    tree, root_branches = sample()
    assert get_next_path(tree, root_branches, [0]) == [1]
    assert get_next_path(tree, root_branches, [2]) is None
    assert get_next_path([], root_branches, []) == [-1, 0, 0]

    tree = [node(mv("e4"), [node(mv("c5"))])]
    assert get_next_path(tree, [], [0]) == [0, 0, 0]


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ([], []),
        ([0], []),
        ([3], [2]),
        ([0, 0, 1], [0, 0, 0]),
        ([0, 0, 0], [0]),
        ([-1, 0, 1], [-1, 0, 0]),
        ([-1, 0, 0], []),
        ([0, 0, 1, 2, 0], [0, 0, 1]),
    ],
)
def test_get_previous_path(path, expected):
    assert get_previous_path(path) == expected


def test_get_last_path_in_line():
    tree, root_branches = sample()
    assert get_last_path_in_line(tree, root_branches, []) == [2]
    assert get_last_path_in_line(tree, root_branches, [0]) == [2]
    assert get_last_path_in_line(tree, root_branches, [0, 0, 0]) == [0, 0, 1]
    assert get_last_path_in_line(tree, root_branches, [-1, 0, 0]) == [-1, 0, 0]
    assert get_last_path_in_line([], [], []) is None
    assert get_last_path_in_line(tree, root_branches, [0, 3, 0]) is None


def test_find_matching_branch_at_path():
    tree, root_branches = sample()
    assert find_matching_branch_at_path(tree, root_branches, [0], {"from": "c7", "to": "c5"}) == [0, 0, 0]
    assert find_matching_branch_at_path(tree, root_branches, [0], {"from": "e7", "to": "e6"}) is None
    assert find_matching_branch_at_path(tree, root_branches, [], {"from": "d2", "to": "d4"}) == [-1, 0, 0]
    assert find_matching_branch_at_path(tree, root_branches, [1], {"from": "c7", "to": "c5"}) is None


def test_matching_respects_promotion():
    tree = [node(mv("e4"), [node(mv("a8=Q", "a7", "a8", "q"))])]
    assert find_matching_branch_at_path(tree, [], [0], {"from": "a7", "to": "a8", "promotion": "q"}) == [0, 0, 0]
    assert find_matching_branch_at_path(tree, [], [0], {"from": "a7", "to": "a8", "promotion": "n"}) is None


def test_continuation_matches():
    tree, root_branches = sample()
    assert continuation_matches(tree, root_branches, [0], {"from": "e7", "to": "e5"}) == [1]
    assert continuation_matches(tree, root_branches, [0], {"from": "c7", "to": "c5"}) is None
    assert continuation_matches(tree, root_branches, [], {"from": "e2", "to": "e4"}) == [0]
    assert continuation_matches(tree, root_branches, [2], {"from": "b8", "to": "c6"}) is None
