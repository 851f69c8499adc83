"""Implementation of the Game/Result repositories using SQLAlchemy"""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel, GameResultModel
from src.db.schema import DBGame, DBGameResult

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(
            id=new_id,
            variant=game.variant,
            starting_position=game.starting_position,
            moves=list(game.moves),
            players=dict(game.players),
            opponent_id=game.opponent_id,
            current_player=game.current_player,
            status=game.status,
        )
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug("Stored new %s game %s", game.variant, new_id)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        # new list/dict objects, so the JSON columns register the change
        game_db.moves = list(game.moves)
        game_db.players = dict(game.players)
        game_db.opponent_id = game.opponent_id
        game_db.current_player = game.current_player
        game_db.status = game.status
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def record_result(self, result: GameResultModel) -> GameResultModel:
        """Store the outcome of a game."""
        result_db = DBGameResult(
            id=uuid4(),
            game_id=result.game_id,
            variant=result.variant,
            result=result.result,
            winner=result.winner,
            opponent_id=result.opponent_id,
            timestamp=result.timestamp,
        )
        self.db.add(result_db)
        self.db.commit()
        self.db.refresh(result_db)
        return self._to_result_model(result_db)

    def list_results(self, game_id: Optional[str] = None) -> list[GameResultModel]:
        query = select(DBGameResult).order_by(DBGameResult.timestamp)
        if game_id is not None:
            query = query.where(DBGameResult.game_id == game_id)
        return [self._to_result_model(result_db) for result_db in self.db.scalars(query)]

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            variant=game_db.variant,
            starting_position=game_db.starting_position,
            moves=list(game_db.moves),
            status=game_db.status,
            current_player=game_db.current_player,
            players=dict(game_db.players),
            opponent_id=game_db.opponent_id,
        )

    def _to_result_model(self, result_db: DBGameResult) -> GameResultModel:
        return GameResultModel(
            game_id=result_db.game_id,
            variant=result_db.variant,
            result=result_db.result,
            winner=result_db.winner,
            opponent_id=result_db.opponent_id,
            timestamp=result_db.timestamp,
        )
