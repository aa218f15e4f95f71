from .comments import get_comment, get_comment_key, orphaned_comment_keys, set_comment
from .cursor import (
    continuation_matches,
    find_matching_branch_at_path,
    get_continuation_path,
    get_last_path_in_line,
    get_next_path,
    get_previous_path,
    is_at_end_of_path,
)
from .errors import IllegalMoveError, InvalidPathError, MoveTreeError, ReplayError
from .modification import AddMoveResult, add_move_to_tree, remove_last_move
from .navigation import (
    STARTING_FEN,
    BranchContext,
    get_branch_context_for_path,
    get_moves_along_path,
    get_node_at_path,
    load_position_from_path,
    traverse_branch_segments,
)
from .paths import (
    PATH_DELIMITER,
    ROOT_PATH_INDEX,
    get_absolute_move_index,
    get_branches_at_path,
    get_main_line_moves,
    get_path_depth,
    is_main_line_path,
    is_root_branch_path,
    is_well_formed_path,
    path_from_string,
    path_to_string,
)
from .record import dump_game_state, load_game_state, new_game_state, validate_game_state
from .replay import ChessOracle, PythonChessOracle, replay_moves, to_chess_move
from .types import BranchSequence, ChessMove, MoveNode, MovePath, MoveRequest, StudyGameState

__all__ = [
    "AddMoveResult",
    "BranchContext",
    "BranchSequence",
    "ChessMove",
    "ChessOracle",
    "IllegalMoveError",
    "InvalidPathError",
    "MoveNode",
    "MovePath",
    "MoveRequest",
    "MoveTreeError",
    "PATH_DELIMITER",
    "PythonChessOracle",
    "ROOT_PATH_INDEX",
    "ReplayError",
    "STARTING_FEN",
    "StudyGameState",
    "add_move_to_tree",
    "continuation_matches",
    "dump_game_state",
    "find_matching_branch_at_path",
    "get_absolute_move_index",
    "get_branch_context_for_path",
    "get_branches_at_path",
    "get_comment",
    "get_comment_key",
    "get_continuation_path",
    "get_last_path_in_line",
    "get_main_line_moves",
    "get_moves_along_path",
    "get_next_path",
    "get_node_at_path",
    "get_path_depth",
    "get_previous_path",
    "is_at_end_of_path",
    "is_main_line_path",
    "is_root_branch_path",
    "is_well_formed_path",
    "load_game_state",
    "load_position_from_path",
    "new_game_state",
    "orphaned_comment_keys",
    "path_from_string",
    "path_to_string",
    "remove_last_move",
    "replay_moves",
    "set_comment",
    "to_chess_move",
    "traverse_branch_segments",
    "validate_game_state",
]
