"""Protocol repositories (implemented with SQLAlchemy in sql_repository.py, with a dictionary in the service tests)"""

from typing import Optional, Protocol
from uuid import UUID

from src.core.models import GameModel, GameResultModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...


class ResultRepository(Protocol):
    """Play history: outcomes of finished games"""

    def record_result(self, result: GameResultModel) -> GameResultModel:
        """Store the outcome of a game."""
        ...

    def list_results(self, game_id: Optional[str] = None) -> list[GameResultModel]:
        """All recorded outcomes (of one game, if given), oldest first."""
        ...
