"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.chess.rules import CHESS_RULES
from src.db.schema import Base
from src.engine.board import Board
from src.xiangqi.rules import XIANGQI_RULES

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


# --- BOARDS FROM PLACEMENT STRINGS ---
@pytest.fixture
def chess_board() -> Callable[[str], Board]:
    """Factory: chess board from a FEN placement"""

    def _build(placement: str) -> Board:
        return Board.from_fen(placement, CHESS_RULES)

    return _build


@pytest.fixture
def xiangqi_board() -> Callable[[str], Board]:
    """Factory: xiangqi board from a FEN placement"""

    def _build(placement: str) -> Board:
        return Board.from_fen(placement, XIANGQI_RULES)

    return _build
