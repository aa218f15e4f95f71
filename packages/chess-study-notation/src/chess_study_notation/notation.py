from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import reflex as rx
from pydantic import BaseModel

from chess_move_tree import ROOT_PATH_INDEX, BranchSequence, MoveNode, path_to_string


@dataclass(frozen=True, slots=True)
class NotationOptions:
    show_move_numbers: bool = True
    show_comments: bool = True
    max_variation_depth: int | None = None
    indent_px: int = 18


def _opts(options: dict[str, Any] | None) -> NotationOptions:
    if not options:
        return NotationOptions()
    return NotationOptions(
        show_move_numbers=bool(options.get("show_move_numbers", True)),
        show_comments=bool(options.get("show_comments", True)),
        max_variation_depth=(
            None
            if options.get("max_variation_depth") in (None, "")
            else int(options["max_variation_depth"])
        ),
        indent_px=int(options.get("indent_px", 18)),
    )


def _move_no(ply: int) -> int:
    return (ply + 1) // 2


def _move_number_prefix(ply: int, *, line_start: bool) -> str | None:
    """Return 'N.' / 'N...' prefix or None."""
    num = _move_no(ply)
    if ply % 2 == 1:
        return f"{num}."
    if line_start:
        return f"{num}..."
    return None


class NotationToken(BaseModel):
    kind: str
    text: str = ""
    path: str = ""  # comment key of the move, see path_to_string
    san: str = ""


class NotationLine(BaseModel):
    indent: str  # e.g. "18px"
    depth: int = 0  # variation nesting, 0 for the main line
    tokens: list[NotationToken]


def _tok(kind: str, **kwargs: Any) -> NotationToken:
    return NotationToken(kind=kind, **kwargs)


def _indent(depth: int, o: NotationOptions) -> str:
    return f"{depth * o.indent_px}px"


def _trim(tokens: list[NotationToken]) -> None:
    while tokens and tokens[-1].kind == "text" and tokens[-1].text == " ":
        tokens.pop()


def _move_tokens(
    *,
    node: MoveNode,
    key: str,
    ply: int,
    line_start: bool,
    comments: Mapping[str, str],
    o: NotationOptions,
) -> list[NotationToken]:
    san = str(node["move"].get("san") or "?")

    out: list[NotationToken] = []
    prefix = (
        _move_number_prefix(ply, line_start=line_start) if o.show_move_numbers else None
    )
    if prefix:
        out.append(_tok("moveno", text=prefix))
        out.append(_tok("text", text=" "))

    out.append(_tok("move", path=key, san=san))
    out.append(_tok("text", text=" "))

    if o.show_comments:
        text = comments.get(key, "").strip()
        if text:
            out.append(_tok("comment", text=text, path=key))
            out.append(_tok("text", text=" "))
    return out


def _sequence_lines(
    *,
    sequence: Sequence[MoveNode],
    prefix: list[int],
    first_ply: int,
    depth: int,
    comments: Mapping[str, str],
    o: NotationOptions,
) -> tuple[list[NotationToken], list[NotationLine]]:
    """Tokens of one linear sequence plus the variation lines hanging off it."""
    tokens: list[NotationToken] = []
    nested: list[NotationLine] = []
    for i, node in enumerate(sequence):
        path = [*prefix, i]
        ply = first_ply + i
        tokens.extend(
            _move_tokens(
                node=node,
                key=path_to_string(path),
                ply=ply,
                line_start=i == 0,
                comments=comments,
                o=o,
            )
        )
        # Branches stored on this node continue from the position after it.
        nested.extend(
            _variation_lines(
                branches=node["branches"],
                anchor=path,
                first_ply=ply + 1,
                depth=depth + 1,
                comments=comments,
                o=o,
            )
        )
    return tokens, nested


def _variation_lines(
    *,
    branches: Sequence[BranchSequence],
    anchor: list[int],
    first_ply: int,
    depth: int,
    comments: Mapping[str, str],
    o: NotationOptions,
) -> list[NotationLine]:
    if not branches:
        return []

    if o.max_variation_depth is not None and depth > o.max_variation_depth:
        return [NotationLine(indent=_indent(depth, o), depth=depth, tokens=[_tok("paren", text="(…)")])]

    lines: list[NotationLine] = []
    for b, sequence in enumerate(branches):
        tokens, nested = _sequence_lines(
            sequence=sequence,
            prefix=[*anchor, b],
            first_ply=first_ply,
            depth=depth,
            comments=comments,
            o=o,
        )
        _trim(tokens)
        head = [_tok("paren", text="("), _tok("text", text=" "), *tokens]
        head.extend([_tok("text", text=" "), _tok("paren", text=")")])
        lines.append(NotationLine(indent=_indent(depth, o), depth=depth, tokens=head))
        lines.extend(nested)
    return lines


def build_notation_lines(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence] = (),
    comments: Mapping[str, str] | None = None,
    options: dict[str, Any] | None = None,
    start_ply: int = 0,
) -> list[NotationLine]:
    """Server-side builder: move tree -> renderable lines.

    ``start_ply`` is the number of half-moves played before the starting
    position (0 for the standard start). The main line comes first, followed
    by root variations and then every other variation in tree order.

    This returns a JSON-serializable structure that can be stored in Reflex State
    and rendered via `rx.foreach` without Python loops over Vars.
    """
    o = _opts(options)
    comments = comments or {}

    lines = _variation_lines(
        branches=root_branches,
        anchor=[ROOT_PATH_INDEX],
        first_ply=start_ply + 1,
        depth=1,
        comments=comments,
        o=o,
    )
    tokens, nested = _sequence_lines(
        sequence=tree,
        prefix=[],
        first_ply=start_ply + 1,
        depth=0,
        comments=comments,
        o=o,
    )
    lines.extend(nested)
    if tokens:
        _trim(tokens)
        lines.insert(0, NotationLine(indent=_indent(0, o), tokens=tokens))
    return lines


_MOVE_STYLE = {
    "display": "inline-block",
    "cursor": "pointer",
    "padding": "1px 3px",
    "borderRadius": "4px",
    "userSelect": "none",
}
_SELECTED_BG = "rgba(59, 130, 246, 0.18)"


def _render_token(
    token: NotationToken, *, selected_key: rx.Var, on_select: rx.EventHandler
) -> rx.Component:
    selected = token.path == selected_key
    # Comments select the move they are stored under.
    pick = on_select({"path": token.path})

    return rx.match(
        token.kind,
        (
            "move",
            rx.el.span(
                token.san,
                title=token.path,
                style=_MOVE_STYLE,
                background_color=rx.cond(selected, _SELECTED_BG, "transparent"),
                font_weight=rx.cond(selected, "600", "400"),
                on_click=pick,
            ),
        ),
        ("moveno", rx.el.span(token.text, opacity="0.7")),
        (
            "comment",
            rx.el.span(
                token.text,
                font_style="italic",
                color="rgba(22, 101, 52, 0.9)",
                cursor="pointer",
                on_click=pick,
            ),
        ),
        ("paren", rx.el.span(token.text, opacity="0.55")),
        rx.el.span(token.text),
    )


def chess_notation(
    lines: list[NotationLine],
    selected_key: str,
    on_select: rx.EventHandler,
) -> rx.Component:
    """Render prebuilt notation lines (Var-friendly).

    Variation lines are set off by a left rule and a smaller font; their
    indentation comes from ``NotationOptions.indent_px`` via ``line.indent``.
    """
    selected_var = rx.Var.create(selected_key)

    def render_line(line: NotationLine) -> rx.Component:
        is_variation = line.depth > 0
        return rx.el.div(
            rx.foreach(
                line.tokens,
                lambda t: _render_token(t, selected_key=selected_var, on_select=on_select),
            ),
            margin_left=line.indent,
            padding_left=rx.cond(is_variation, "8px", "0px"),
            border_left=rx.cond(is_variation, "2px solid rgba(0,0,0,0.08)", "none"),
            font_size=rx.cond(is_variation, "13px", "14px"),
            white_space="pre-wrap",
            word_break="break-word",
        )

    return rx.el.div(
        rx.foreach(lines, render_line),
        font_family="ui-sans-serif, system-ui, sans-serif",
        line_height="1.55",
        color="rgba(0,0,0,0.92)",
    )
