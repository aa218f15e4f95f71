import os


def test_package_imports_and_component_contract():
    # Avoid creating symlinks into an app assets folder during import-time smoke tests.
    os.environ["REFLEX_BACKEND_ONLY"] = "1"

    import reflex as rx

    from chess_study_editor import StudyBoard, StudyEditorState, study_board, study_editor

    assert callable(study_editor)
    assert callable(study_board)
    assert issubclass(StudyEditorState, rx.State)

    assert StudyBoard.tag == "StudyBoardShim"
    assert any(dep.startswith("react-chessboard@") for dep in StudyBoard.lib_dependencies)
    inst = StudyBoard.create()
    assert "const StudyBoardShim = ClientSide" in (inst._get_custom_code() or "")
