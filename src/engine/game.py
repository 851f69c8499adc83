"""
The game session is the entrypoint into the engine for the service layer (and for any UI / AI adapter).
It is responsible for orchestrating a turn: select -> enumerate -> highlight, and move -> validate -> apply ->
advance turn -> reclassify status.

Every accepted operation produces a NEW GameState value. Rejections return None (make_move) or the unchanged state.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Optional

from src.core.exceptions import GameStateError, InvalidNotationError, InvalidPositionError
from src.core.models import GameModel
from src.core.shared_types import TERMINAL_STATUSES, Color, GameStatus
from src.engine.board import Board
from src.engine.check import (
    drop_leaves_king_in_check,
    get_game_status,
    get_legal_drops,
    get_legal_moves,
    leaves_king_in_check,
    require_kings,
)
from src.engine.moves import Move, apply_drop, apply_move, is_valid_drop, is_valid_move
from src.engine.notation import is_drop_notation, parse_drop, parse_move, position_to_algebraic
from src.engine.pieces import Piece
from src.engine.position import Position
from src.engine.rules import PROMOTE_SUFFIX, VariantRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameState:
    rules: VariantRules
    board: Board
    current_player: Color
    status: GameStatus
    move_history: tuple[Move, ...] = ()
    # UI transient: re-derived on every click, never carried across moves
    selected_square: Optional[Position] = None
    # shogi: piece type picked from the hand, `possible_moves` then holds its drop squares
    selected_drop: Optional[StrEnum] = None
    possible_moves: frozenset[Position] = field(default_factory=frozenset)
    position_history: tuple[str, ...] = ()
    # Where the game started from. Undo and persistence replay the history on top of it
    initial_board: Optional[Board] = None
    initial_player: Optional[Color] = None

    @property
    def is_over(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def winner(self) -> Optional[Color]:
        """
        Only checkmate has a winner.
        Given we know it is checkmate, the side to move just got mated and the opponent must be the winner
        (jungle: the opponent reached the den, or left the side to move without a single move)
        """
        if self.status != GameStatus.CHECKMATE:
            return None
        return self.rules.opponent(self.current_player)

    @property
    def last_move(self) -> Optional[Move]:
        return self.move_history[-1] if self.move_history else None


def _can_capture_en_passant(rules: VariantRules, board: Board, color: Color) -> bool:
    """Is there a legal en passant capture onto the board's en passant square for `color`?"""
    target = board.en_passant_target
    if target is None:
        return False
    for from_square in board.locate_color(color):
        if not is_valid_move(rules, board, from_square, target):
            continue
        _, move = apply_move(rules, board, from_square, target)
        if move.is_en_passant and not leaves_king_in_check(rules, board, from_square, target):
            return True
    return False


def position_key(rules: VariantRules, board: Board, color: Color) -> str:
    """
    Placement + side to move. Used to detect repetitions.

    Pieces in hand are part of the position.
    The en passant square only counts when that capture is actually possible.
    """
    key = f"{board.to_fen(rules)} {rules.side_to_fen(color)}"
    if any(board.hands.values()):
        key += f" {board.hand_to_fen(rules)}"
    target = board.en_passant_target
    if target is not None and _can_capture_en_passant(rules, board, color):
        key += f" {position_to_algebraic(target, rules.dimensions)}"
    return key


def new_game(
    rules: VariantRules,
    board: Optional[Board] = None,
    current_player: Optional[Color] = None,
    status: Optional[GameStatus] = None,
    check_kings: bool = True,
) -> GameState:
    """
    Start a game: initial layout, first player to move, empty history.
    ----

    The optional parameters set up an arbitrary position (and even a forced status) to continue from.
    `check_kings` rejects positions in which a side does not have exactly one king.
    """
    board = board.copy() if board is not None else rules.initial_board()
    current_player = current_player or rules.first_player
    if current_player not in rules.players:
        raise GameStateError(f"{current_player} does not play {rules.variant}")
    if check_kings:
        require_kings(rules, board)

    if status is None:
        status = get_game_status(rules, board, current_player)

    logger.debug("New %s game, %s to move, status %s", rules.variant, current_player, status)
    return GameState(
        rules=rules,
        board=board,
        current_player=current_player,
        status=status,
        position_history=(position_key(rules, board, current_player),),
        initial_board=board.copy(),
        initial_player=current_player,
    )


def _advance(state: GameState, board: Board, move: Move) -> GameState:
    """Record the move, hand the turn to the opponent and reclassify (repeating a position too often is a draw)."""
    rules = state.rules
    next_player = rules.opponent(state.current_player)
    status = get_game_status(rules, board, next_player)

    key = position_key(rules, board, next_player)
    position_history = (*state.position_history, key)
    if status not in TERMINAL_STATUSES and position_history.count(key) >= rules.repetition_limit:
        status = GameStatus.DRAW

    if status != state.status:
        logger.info("%s game: %s -> %s", rules.variant, state.status, status)
    logger.debug("Accepted move %s", move.to_notation(rules))

    return replace(
        state,
        board=board,
        current_player=next_player,
        status=status,
        move_history=(*state.move_history, move),
        selected_square=None,
        selected_drop=None,
        possible_moves=frozenset(),
        position_history=position_history,
    )


def make_move(
    state: GameState,
    from_square: Position,
    to_square: Position,
    promotion: Optional[StrEnum] = None,
) -> Optional[GameState]:
    """
    Attempt a move
    -----

    Rejected (returns None, nothing changes) when:
    1. the game is over
    2. the origin does not hold a piece of the side to move
    3. the piece can not move there (geometry / blocked / own piece on the destination)
    4. the move puts or leaves the mover's own king in check
    5. a promotion piece is requested that the variant does not know

    On success:
    6. apply the move on a copy of the board, append it to the history
    7. hand the turn to the opponent, clear the selection
    8. reclassify the status for the opponent (repeating a position too often is a draw)
    """
    rules = state.rules
    if state.is_over:
        logger.debug("Rejected move: game is over (%s)", state.status)
        return None

    piece = state.board.piece_at(from_square)
    if piece is None or piece.color != state.current_player:
        logger.debug("Rejected move: no %s piece on %s", state.current_player, from_square)
        return None

    if not is_valid_move(rules, state.board, from_square, to_square):
        logger.debug("Rejected move: %s may not move from %s to %s", piece.type, from_square, to_square)
        return None

    if leaves_king_in_check(rules, state.board, from_square, to_square):
        logger.debug("Rejected move: %s to %s leaves the king in check", from_square, to_square)
        return None

    if promotion is not None and promotion not in rules.promotion_types:
        logger.debug("Rejected move: cannot promote to %s", promotion)
        return None

    board, move = apply_move(rules, state.board, from_square, to_square, promotion)
    return _advance(state, board, move)


def make_drop(state: GameState, piece_type: StrEnum, to_square: Position) -> Optional[GameState]:
    """
    Attempt to drop a piece from the hand of the side to move (shogi)
    -----

    Rejected (returns None) when the game is over, the piece is not in hand, the variant's drop rule
    forbids the square, or the drop leaves the mover's own king in check.
    """
    rules = state.rules
    if state.is_over:
        logger.debug("Rejected drop: game is over (%s)", state.status)
        return None

    piece = Piece(piece_type, state.current_player)
    if not is_valid_drop(rules, state.board, piece, to_square):
        logger.debug("Rejected drop: %s may not be dropped on %s", piece_type, to_square)
        return None

    if drop_leaves_king_in_check(rules, state.board, piece, to_square):
        logger.debug("Rejected drop: %s on %s leaves the king in check", piece_type, to_square)
        return None

    board, move = apply_drop(rules, state.board, piece, to_square)
    return _advance(state, board, move)


def _deselect(state: GameState) -> GameState:
    if state.selected_square is None and state.selected_drop is None and not state.possible_moves:
        return state
    return replace(state, selected_square=None, selected_drop=None, possible_moves=frozenset())


def _select(state: GameState, square: Position) -> GameState:
    """Own piece (and the game still running) -> selected with its legal destinations, anything else -> idle"""
    piece = state.board.piece_at(square)
    if state.is_over or piece is None or piece.color != state.current_player:
        return _deselect(state)
    possible_moves = frozenset(get_legal_moves(state.rules, state.board, square))
    return replace(state, selected_square=square, selected_drop=None, possible_moves=possible_moves)


def select_square(state: GameState, square: Position) -> GameState:
    """
    Click state machine
    ----

    * idle + own piece: select it, highlight its legal destinations
    * idle + anything else: nothing happens
    * selected + the same square: back to idle
    * selected + another square: try to move there. If that fails, treat the click as a fresh selection.
    * piece from the hand selected + a square: try to drop it there. If that fails, a fresh selection.
    """
    if state.selected_drop is not None:
        after_drop = make_drop(state, state.selected_drop, square)
        if after_drop is not None:
            return after_drop
        return _select(state, square)

    if state.selected_square is None:
        return _select(state, square)

    if square == state.selected_square:
        return _deselect(state)

    after_move = make_move(state, state.selected_square, square)
    if after_move is not None:
        return after_move
    return _select(state, square)


def select_hand_piece(state: GameState, piece_type: StrEnum) -> GameState:
    """
    Click on a piece in the hand of the side to move: highlight where it can be dropped.

    Clicking the selected hand piece again, or a piece that is not in hand, goes back to idle.
    """
    if state.is_over or piece_type not in state.board.hand(state.current_player):
        return _deselect(state)
    if state.selected_drop == piece_type:
        return _deselect(state)
    drops = get_legal_drops(state.rules, state.board, Piece(piece_type, state.current_player))
    return replace(state, selected_square=None, selected_drop=piece_type, possible_moves=frozenset(drops))


def _replay(state: GameState, moves: list[Move]) -> GameState:
    """Start over from the initial position and play the moves again."""
    replayed = new_game(
        state.rules,
        board=state.initial_board,
        current_player=state.initial_player,
        check_kings=False,
    )
    for move in moves:
        if move.from_square is None:
            after_move = make_drop(replayed, move.piece.type, move.to_square)
        else:
            after_move = make_move(replayed, move.from_square, move.to_square, move.promotion)
        if after_move is None:
            raise GameStateError(f"Cannot replay move {move.to_notation(state.rules)}")
        replayed = after_move
    return replayed


def undo_move(state: GameState) -> GameState:
    """Take back the last move. No history -> nothing to undo."""
    if not state.move_history:
        return state
    logger.debug("Undo %s", state.move_history[-1].to_notation(state.rules))
    return _replay(state, list(state.move_history[:-1]))


def declare_draw(state: GameState) -> GameState:
    """Draw by agreement. A finished game stays as it is."""
    if state.is_over:
        return state
    logger.info("%s game: %s -> %s (agreement)", state.rules.variant, state.status, GameStatus.DRAW)
    return replace(
        state, status=GameStatus.DRAW, selected_square=None, selected_drop=None, possible_moves=frozenset()
    )


def force_status(state: GameState, status: GameStatus) -> GameState:
    """Set the status directly (ex. resuming a stored game, or setting up a finished game in tests)."""
    return replace(
        state, status=GameStatus(status), selected_square=None, selected_drop=None, possible_moves=frozenset()
    )


def promotion_from_letter(
    rules: VariantRules, letter: Optional[str], piece_type: Optional[StrEnum] = None
) -> Optional[StrEnum]:
    """
    Promotion suffix from move text to a piece type of the variant.

    A piece letter names the new piece ('q' in 'e7e8q'). '+' asks for the promoted form of the moving piece (shogi).
    """
    if letter is None:
        return None
    if letter == PROMOTE_SUFFIX:
        promoted = rules.promoted_forms.get(piece_type) if piece_type is not None else None
        if promoted is None:
            raise InvalidNotationError(f"{piece_type or 'this piece'} cannot promote in {rules.variant}")
        return promoted

    promoted = rules.piece_type_from_letter(letter)
    if promoted is None or promoted not in rules.promotion_types:
        raise InvalidNotationError(f"Cannot promote to {letter!r} in {rules.variant}")
    return promoted


def piece_type_from_drop_letter(rules: VariantRules, letter: str) -> StrEnum:
    piece_type = rules.piece_type_from_letter(letter)
    if piece_type is None or not rules.allows_drops:
        raise InvalidNotationError(f"Cannot drop {letter!r} in {rules.variant}")
    return piece_type


def move_from_notation(state: GameState, text: str) -> Optional[GameState]:
    """Parse the move text (ex. 'e2e4', 'b1-c3', 'e7e8q', 'h10h9', 'b7b8+', 'p*e5') and attempt the move."""
    rules = state.rules
    if is_drop_notation(text):
        letter, to_square = parse_drop(text, rules.dimensions)
        return make_drop(state, piece_type_from_drop_letter(rules, letter), to_square)

    from_square, to_square, letter = parse_move(text, rules.dimensions)
    piece = state.board.piece_at(from_square)
    promotion = promotion_from_letter(rules, letter, piece.type if piece is not None else None)
    return make_move(state, from_square, to_square, promotion)


# --- CONVERSION FROM / TO THE BOUNDARY MODEL ---
def starting_position_of(state: GameState) -> str:
    """
    Placement of the initial board + side that moved first, ex. '<fen placement> w'

    Pieces in hand at the start (shogi) follow as a third field, ex. '<fen placement> w Pp'
    """
    board = state.initial_board or state.rules.initial_board()
    player = state.initial_player or state.rules.first_player
    text = f"{board.to_fen(state.rules)} {state.rules.side_to_fen(player)}"
    if any(board.hands.values()):
        text += f" {board.hand_to_fen(state.rules)}"
    return text


def parse_starting_position(text: str, rules: VariantRules) -> tuple[Board, Optional[Color]]:
    """'<placement> [w|b] [hand]' -> (board, side to move, None when not given)"""
    fields = text.strip().split()
    if not fields or len(fields) > 3:
        raise InvalidPositionError(f"Expected '<placement> [w|b] [hand]', got {text!r}")

    board = Board.from_fen(fields[0], rules)
    first_player = None
    if len(fields) > 1:
        first_player = rules.side_from_fen(fields[1])
        if first_player is None:
            raise InvalidPositionError(f"Invalid side to move {fields[1]!r} in {text!r}")
    if len(fields) > 2:
        board.set_hand_from_fen(fields[2], rules)
        if any(board.hands.values()) and not rules.allows_drops:
            raise InvalidPositionError(f"{rules.variant} has no pieces in hand: {text!r}")
    return board, first_player


def game_to_model(state: GameState, players: Optional[dict[str, str]] = None) -> GameModel:
    """Encode into the format the Service layer uses. The position itself is stored as start + moves."""
    return GameModel(
        variant=str(state.rules.variant),
        starting_position=starting_position_of(state),
        moves=[move.to_notation(state.rules) for move in state.move_history],
        status=str(state.status),
        current_player=str(state.current_player),
        players=dict(players or {}),
    )


def game_from_model(model: GameModel, rules: VariantRules) -> GameState:
    """
    Define how to construct a GameState from the information the Service layer actually has
    ----

    1. validate variant and status
    2. set up the starting position
    3. replay every stored move (an illegal one means the record is corrupt)
    4. a stored terminal status that replaying does not reproduce (ex. draw by agreement) is kept
    """
    if model.variant != rules.variant:
        raise GameStateError(f"Cannot load a {model.variant!r} game with the {rules.variant} rules")
    if model.status not in {status.value for status in GameStatus}:
        raise GameStateError(
            f"Invalid status code: {model.status!r}. Pick one from {', '.join(GameStatus)}"
        )

    try:
        board, first_player = parse_starting_position(model.starting_position, rules)
    except InvalidPositionError as error:
        raise GameStateError(f"Corrupt starting position {model.starting_position!r}") from error

    state = new_game(rules, board=board, current_player=first_player, check_kings=False)
    for text in model.moves:
        after_move = move_from_notation(state, text)
        if after_move is None:
            raise GameStateError(f"Stored move {text!r} is not legal in this game")
        state = after_move

    stored_status = GameStatus(model.status)
    if stored_status in TERMINAL_STATUSES and stored_status != state.status:
        state = force_status(state, stored_status)
    return state


class GameSession:
    """
    Holds the single current GameState of one game.

    Every accepted operation replaces `state` as a whole. Rejected operations leave it untouched.
    """

    def __init__(self, rules: VariantRules, state: Optional[GameState] = None) -> None:
        self.rules = rules
        self.state = state if state is not None else new_game(rules)

    def click(self, square: Position) -> GameState:
        self.state = select_square(self.state, square)
        return self.state

    def click_hand(self, piece_type: StrEnum) -> GameState:
        self.state = select_hand_piece(self.state, piece_type)
        return self.state

    def move(self, from_square: Position, to_square: Position, promotion: Optional[StrEnum] = None) -> bool:
        """True if the move was accepted."""
        after_move = make_move(self.state, from_square, to_square, promotion)
        if after_move is None:
            return False
        self.state = after_move
        return True

    def drop(self, piece_type: StrEnum, to_square: Position) -> bool:
        """True if the drop was accepted."""
        after_drop = make_drop(self.state, piece_type, to_square)
        if after_drop is None:
            return False
        self.state = after_drop
        return True

    def move_notation(self, text: str) -> bool:
        """Same as `move` (or `drop`), from text. Malformed text raises InvalidNotationError."""
        after_move = move_from_notation(self.state, text)
        if after_move is None:
            return False
        self.state = after_move
        return True

    def undo(self) -> GameState:
        self.state = undo_move(self.state)
        return self.state

    def declare_draw(self) -> GameState:
        self.state = declare_draw(self.state)
        return self.state

    def reset(self) -> GameState:
        """Discard the game and start a fresh one from the initial layout."""
        self.state = new_game(self.rules)
        return self.state

    def legal_moves_for(self, square: Position) -> set[Position]:
        """Legal destinations of the piece on `square` (empty if it is not that side's turn or the game is over)."""
        piece = self.state.board.piece_at(square)
        if self.state.is_over or piece is None or piece.color != self.state.current_player:
            return set()
        return get_legal_moves(self.rules, self.state.board, square)

    def legal_drops_for(self, piece_type: StrEnum) -> set[Position]:
        """Where the side to move may drop that piece from its hand."""
        if self.state.is_over:
            return set()
        return get_legal_drops(self.rules, self.state.board, Piece(piece_type, self.state.current_player))

    @property
    def is_over(self) -> bool:
        return self.state.is_over

    @property
    def winner(self) -> Optional[Color]:
        return self.state.winner
