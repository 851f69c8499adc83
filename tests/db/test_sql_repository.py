"""Unit tests for src/db/sql_repository.py"""

from datetime import datetime
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from src.core.models import GameResultModel
from src.db.sql_repository import GameModel, SQLGameRepository


@pytest.fixture
def model() -> GameModel:
    """Mock game data"""
    return GameModel(
        variant="chess",
        starting_position="rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w",
        moves=["e2e4", "e7e5", "g1f3"],
        status="playing",
        current_player="black",
        players={"white": "player_white", "black": "player_black"},
        opponent_id="player_black",
    )


def test_create_game(db_session_repo: Session, model: GameModel) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == model


def test_get_game_by_id(db_session_repo: Session, model: GameModel) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(model)
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game


def test_get_unknown_game(db_session_repo: Session) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None


def test_update_game(db_session_repo: Session, model: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(model)

    model.moves = [*model.moves, "b8c6"]
    model.current_player = "white"
    updated = repo.update_game(game_id, model)
    assert updated is not None
    assert updated.moves == ["e2e4", "e7e5", "g1f3", "b8c6"]

    fetched = repo.get_game(game_id)
    assert fetched is not None
    assert fetched.moves == updated.moves
    assert fetched.current_player == "white"


def test_update_unknown_game(db_session_repo: Session, model: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    assert repo.update_game(uuid4(), model) is None


def test_delete_game(db_session_repo: Session, model: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(model)
    deleted = repo.delete_game(game_id)
    assert deleted == model
    assert repo.get_game(game_id) is None
    assert repo.delete_game(game_id) is None


def test_results(db_session_repo: Session) -> None:
    """Results are listed oldest first, and can be filtered by game."""
    repo = SQLGameRepository(db_session_repo)
    first = GameResultModel("game-1", "chess", "checkmate", "white", "bob", datetime(2024, 1, 1, 12, 0))
    second = GameResultModel("game-2", "xiangqi", "draw", None, None, datetime(2024, 1, 2, 12, 0))
    repo.record_result(second)
    repo.record_result(first)

    assert repo.list_results() == [first, second]
    assert repo.list_results("game-2") == [second]
    assert repo.list_results("game-3") == []
