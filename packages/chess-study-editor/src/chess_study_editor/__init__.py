from .board import StudyBoard, study_board
from .builder import StudyTreeBuilder
from .editor import (
    EditorView,
    StudyEditorState,
    apply_to_study,
    board_move_action,
    comment_action,
    render_view,
    select_action,
    study_editor,
    text_move_action,
)
from .session import StudyOptions, StudySession

__all__ = [
    "EditorView",
    "StudyBoard",
    "StudyEditorState",
    "StudyOptions",
    "StudySession",
    "StudyTreeBuilder",
    "apply_to_study",
    "board_move_action",
    "comment_action",
    "render_view",
    "select_action",
    "study_board",
    "study_editor",
    "text_move_action",
]
