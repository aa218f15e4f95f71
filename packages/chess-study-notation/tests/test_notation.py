import os

# Avoid creating symlinks into an app assets folder during import-time smoke tests.
os.environ["REFLEX_BACKEND_ONLY"] = "1"

from chess_study_notation import NotationOptions, build_notation_lines, chess_notation  # noqa: E402


def node(san, *branches):
    return {"move": {"from": "a1", "to": "a2", "san": san}, "branches": [list(b) for b in branches]}


def study():
    # 1. e4 {Best} (1... c5 2. Nf3) 1... e5, plus root variation (1. d4)
    tree = [node("e4", [node("c5"), node("Nf3")]), node("e5")]
    root_branches = [[node("d4")]]
    return tree, root_branches


def texts(line):
    out = []
    for t in line.tokens:
        out.append(t.san if t.kind == "move" else t.text)
    return "".join(out)


def test_package_imports_and_component_contract():
    assert callable(chess_notation)
    assert NotationOptions().indent_px == 18


def test_main_line_then_variations():
    tree, root_branches = study()
    lines = build_notation_lines(tree, root_branches, comments={"0": "Best"})

    assert [line.indent for line in lines] == ["0px", "18px", "18px"]
    assert texts(lines[0]) == "1. e4 Best e5"
    assert texts(lines[1]) == "( 1. d4 )"
    assert texts(lines[2]) == "( 1... c5 2. Nf3 )"


def test_move_tokens_carry_path_keys():
    tree, root_branches = study()
    lines = build_notation_lines(tree, root_branches)
    keys = [t.path for line in lines for t in line.tokens if t.kind == "move"]
    assert keys == ["0", "1", "-1-0-0", "0-0-0", "0-0-1"]


def test_options_hide_numbers_and_comments():
    tree, root_branches = study()
    lines = build_notation_lines(
        tree,
        root_branches,
        comments={"0": "Best"},
        options={"show_move_numbers": False, "show_comments": False, "indent_px": 10},
    )
    assert texts(lines[0]) == "e4 e5"
    assert lines[2].indent == "10px"
    assert all(t.kind not in ("moveno", "comment") for line in lines for t in line.tokens)


def test_max_variation_depth_collapses_deep_lines():
    tree = [node("e4", [node("c5", [node("Nc3")])])]
    lines = build_notation_lines(tree, options={"max_variation_depth": 1})
    assert [texts(line) for line in lines] == ["1. e4", "( 1... c5 )", "(…)"]
    assert lines[2].indent == "36px"


def test_black_to_move_start():
    tree = [node("e5"), node("Nf3")]
    lines = build_notation_lines(tree, start_ply=1)
    assert texts(lines[0]) == "1... e5 2. Nf3"


def test_empty_tree_has_no_lines():
    assert build_notation_lines([], []) == []


def test_lines_carry_depth_and_selectable_comments():
    tree = [node("e4", [node("c5", [node("Nc3")])]), node("e5")]
    lines = build_notation_lines(tree, comments={"0-0-0": "Sicilian"})
    assert [line.depth for line in lines] == [0, 1, 2]

    comment = next(t for t in lines[1].tokens if t.kind == "comment")
    assert comment.text == "Sicilian"
    assert comment.path == "0-0-0"
    assert [t.text for t in lines[2].tokens if t.kind == "paren"] == ["(", ")"]
