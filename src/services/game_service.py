"""Orchestration of communication from API router to the rules engine and persistence layers (and the reverse direction)."""

import logging
from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    DrawRequest,
    DropRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    SelectHandPieceRequest,
    SelectSquareRequest,
    UndoMoveRequest,
)
from src.core.config import Settings, get_settings
from src.core.exceptions import GameStateError, IllegalMoveError, RepositoryError
from src.core.models import GameModel, GameResultModel
from src.core.shared_types import TERMINAL_STATUSES
from src.db.repository import GameRepository, ResultRepository
from src.engine.check import get_legal_drops, get_legal_moves
from src.engine.game import (
    GameState,
    declare_draw,
    game_from_model,
    game_to_model,
    make_drop,
    make_move,
    new_game,
    parse_starting_position,
    piece_type_from_drop_letter,
    promotion_from_letter,
    select_hand_piece,
    select_square,
    undo_move,
)
from src.engine.notation import algebraic_to_position, format_drop, format_move, position_to_algebraic
from src.engine.pieces import Piece
from src.engine.position import Position
from src.services.registry import get_rules

logger = logging.getLogger(__name__)


class GameService:
    """Orchestration of layers for a board game of any registered variant."""

    def __init__(
        self,
        repository: GameRepository,
        results: Optional[ResultRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.repo = repository
        # SQLGameRepository implements both protocols
        self.results = results if results is not None else repository
        self.settings = settings or get_settings()

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """A player requested to create a new game, playing the pieces of the requested color."""
        rules = get_rules(request.variant)
        if request.color not in rules.players:
            raise GameStateError(
                f"Cannot create new game. Color {request.color} not in {', '.join(rules.players)}."
            )

        board = None
        first_player = None
        if request.starting_position is not None:
            board, first_player = parse_starting_position(request.starting_position, rules)

        state = new_game(
            rules, board=board, current_player=first_player, check_kings=self.settings.require_kings
        )
        players = {str(request.color): request.player_name}
        if request.opponent_id is not None:
            players[str(rules.opponent(request.color))] = request.opponent_id

        created_game_data = game_to_model(state, players)
        created_game_data.opponent_id = request.opponent_id

        # Store the GameModel in the repository
        stored_game, game_id = self.repo.create_game(created_game_data)
        logger.info("Created %s game %s for %s", rules.variant, game_id, request.player_name)

        # A custom starting position can already be decided
        self._record_result_if_over(game_id, state, stored_game)
        return self._create_game_response(game_id, state, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        stored_model, state = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, state, stored_model)

    def select_square(self, request: SelectSquareRequest) -> GameResponse:
        """
        A click on the board.
        ----

        The selection itself is not persisted: the client sends along the square (or hand piece) it has selected.
        A click that completes a move or a drop is persisted like any other move.
        """
        stored_model, state = self._load_game(request.game_id)
        rules = state.rules

        if request.selected_drop is not None:
            state = select_hand_piece(state, piece_type_from_drop_letter(rules, request.selected_drop))
        elif request.selected_square is not None:
            state = select_square(state, algebraic_to_position(request.selected_square, rules.dimensions))
        after_click = select_square(state, algebraic_to_position(request.square, rules.dimensions))

        if len(after_click.move_history) > len(state.move_history):
            stored_model = self._store(request.game_id, after_click, stored_model)
        return self._create_game_response(request.game_id, after_click, stored_model)

    def select_hand_piece(self, request: SelectHandPieceRequest) -> GameResponse:
        """A click on a piece in the hand: highlight the squares it can be dropped on."""
        stored_model, state = self._load_game(request.game_id)
        piece_type = piece_type_from_drop_letter(state.rules, request.piece)
        after_click = select_hand_piece(state, piece_type)
        return self._create_game_response(request.game_id, after_click, stored_model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """
        Retrieve the legal moves of the side to move (or of a single piece) in move notation.

        Without a square, the drops from the hand are listed too ('p*e5').
        """
        _, state = self._load_game(request.game_id)
        rules = state.rules

        hand: list[StrEnum] = []
        if state.is_over:
            squares: list[Position] = []
        elif request.square is not None:
            square = algebraic_to_position(request.square, rules.dimensions)
            piece = state.board.piece_at(square)
            squares = [square] if piece is not None and piece.color == state.current_player else []
        else:
            squares = state.board.locate_color(state.current_player)
            hand = sorted(set(state.board.hand(state.current_player)))

        legal_moves = [
            format_move(from_square, to_square, rules.dimensions)
            for from_square in squares
            for to_square in sorted(get_legal_moves(rules, state.board, from_square))
        ]
        legal_moves += [
            format_drop(rules.fen_letters[piece_type], to_square, rules.dimensions)
            for piece_type in hand
            for to_square in sorted(get_legal_drops(rules, state.board, Piece(piece_type, state.current_player)))
        ]
        return LegalMovesResponse(
            game_id=request.game_id, color=state.current_player, legal_moves=legal_moves
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""
        stored_model, state = self._load_game(request.game_id)
        rules = state.rules

        # make sure it is your turn
        if request.player_name is not None:
            self._assert_your_turn(stored_model, state, request.player_name)

        from_square = algebraic_to_position(request.from_square, rules.dimensions)
        to_square = algebraic_to_position(request.to_square, rules.dimensions)
        piece = state.board.piece_at(from_square)
        promotion = promotion_from_letter(rules, request.promote_to, piece.type if piece is not None else None)

        after_move = make_move(state, from_square, to_square, promotion)
        if after_move is None:
            raise IllegalMoveError(
                f"Move not allowed: {format_move(from_square, to_square, rules.dimensions, request.promote_to)} "
                f"(status: {state.status}, {state.current_player} to move)"
            )

        stored_model = self._store(request.game_id, after_move, stored_model)
        return self._create_game_response(request.game_id, after_move, stored_model)

    def drop_piece(self, request: DropRequest) -> GameResponse:
        """Put a piece from the hand of the side to move on the board."""
        stored_model, state = self._load_game(request.game_id)
        rules = state.rules

        if request.player_name is not None:
            self._assert_your_turn(stored_model, state, request.player_name)

        piece_type = piece_type_from_drop_letter(rules, request.piece)
        to_square = algebraic_to_position(request.to_square, rules.dimensions)

        after_drop = make_drop(state, piece_type, to_square)
        if after_drop is None:
            raise IllegalMoveError(
                f"Drop not allowed: {format_drop(request.piece, to_square, rules.dimensions)} "
                f"(status: {state.status}, {state.current_player} to move)"
            )

        stored_model = self._store(request.game_id, after_drop, stored_model)
        return self._create_game_response(request.game_id, after_drop, stored_model)

    def undo_move(self, request: UndoMoveRequest) -> GameResponse:
        """Take back the last move. A finished game keeps its result, so it cannot be taken back."""
        stored_model, state = self._load_game(request.game_id)
        if state.is_over:
            raise GameStateError(f"Game is already over. status: {state.status}")
        if not state.move_history:
            raise GameStateError("No moves to undo.")
        after_undo = undo_move(state)
        stored_model = self._store(request.game_id, after_undo, stored_model)
        return self._create_game_response(request.game_id, after_undo, stored_model)

    def declare_draw(self, request: DrawRequest) -> GameResponse:
        """Both players agreed on a draw."""
        stored_model, state = self._load_game(request.game_id)
        if state.is_over:
            raise GameStateError(f"Game is already over. status: {state.status}")
        after_draw = declare_draw(state)
        stored_model = self._store(request.game_id, after_draw, stored_model)
        return self._create_game_response(request.game_id, after_draw, stored_model)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        deleted = self.repo.delete_game(request.game_id)
        if deleted is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game %s", request.game_id)

    def list_results(self, game_id: Optional[UUID] = None) -> list[GameResultModel]:
        """Show the recorded outcomes of finished games."""
        return self.results.list_results(None if game_id is None else str(game_id))

    # -- Internal helpers --
    def _load_game(self, game_id: UUID) -> tuple[GameModel, GameState]:
        """Fetch the record and rebuild the game from it (replaying the stored moves)."""
        stored_model = self._fetch_game(game_id)
        rules = get_rules(stored_model.variant)
        return stored_model, game_from_model(stored_model, rules)

    def _store(self, game_id: UUID, state: GameState, stored_model: GameModel) -> GameModel:
        """Persist the new state. Record the outcome if this change finished the game."""
        updated_model = game_to_model(state, stored_model.players)
        updated_model.opponent_id = stored_model.opponent_id
        stored = self.repo.update_game(game_id, updated_model)
        if stored is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        self._record_result_if_over(game_id, state, stored)
        return stored

    def _record_result_if_over(self, game_id: UUID, state: GameState, model: GameModel) -> None:
        """A terminal status is recorded once per game."""
        if state.status not in TERMINAL_STATUSES:
            return
        if self.results.list_results(str(game_id)):
            return

        winner = state.winner
        result = GameResultModel(
            game_id=str(game_id),
            variant=str(state.rules.variant),
            result=str(state.status),
            winner=None if winner is None else str(winner),
            opponent_id=model.opponent_id,
            timestamp=datetime.now(timezone.utc),
        )
        self.results.record_result(result)
        logger.info("Game %s finished: %s (winner: %s)", game_id, result.result, result.winner)

    def _assert_your_turn(self, model: GameModel, state: GameState, player: str) -> None:
        """You must wait for your turn before making a move."""
        player_to_move = model.players.get(str(state.current_player))
        if player_to_move is not None and player != player_to_move:
            raise GameStateError(
                f"It is not your turn. Waiting for player {player_to_move} to make a move first."
            )

    def _create_game_response(self, game_id: UUID, state: GameState, model: GameModel) -> GameResponse:
        """Convert the game state (and the stored record) to a GameResponse."""
        rules = state.rules
        return GameResponse(
            game_id=game_id,
            variant=rules.variant,
            players=model.players,
            board=state.board.to_fen(rules),
            current_player=state.current_player,
            status=state.status,
            starting_position=model.starting_position,
            move_history=[move.to_notation(rules) for move in state.move_history],
            winner=state.winner,
            selected_square=(
                None
                if state.selected_square is None
                else position_to_algebraic(state.selected_square, rules.dimensions)
            ),
            possible_moves=[
                position_to_algebraic(square, rules.dimensions) for square in sorted(state.possible_moves)
            ],
            hands={
                str(color): sorted(rules.fen_letters[piece_type] for piece_type in state.board.hand(color))
                for color in rules.players
                if state.board.hand(color)
            },
            selected_drop=None if state.selected_drop is None else rules.fen_letters[state.selected_drop],
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
