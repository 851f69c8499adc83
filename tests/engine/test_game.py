"""Unit tests for /src/engine/game.py"""

from typing import Callable

import pytest

from src.chess.board import STARTING_POSITION
from src.chess.pieces import PieceType
from src.chess.rules import CHESS_RULES
from src.core.exceptions import GameStateError, InvalidNotationError, InvalidPositionError, InvariantViolationError
from src.core.models import GameModel
from src.core.shared_types import Color, GameStatus, Variant
from src.engine.board import Board
from src.engine.game import (
    GameSession,
    GameState,
    declare_draw,
    force_status,
    game_from_model,
    game_to_model,
    make_move,
    move_from_notation,
    new_game,
    parse_starting_position,
    position_key,
    promotion_from_letter,
    select_square,
    undo_move,
)
from src.xiangqi.rules import XIANGQI_RULES
from tests.helpers import square, squares, xq

BoardFactory = Callable[[str], Board]


def play(state: GameState, *moves: str) -> GameState:
    """Play a sequence of moves, every one of them must be accepted."""
    for text in moves:
        after_move = move_from_notation(state, text)
        assert after_move is not None, f"{text} was rejected"
        state = after_move
    return state


@pytest.fixture
def chess_game() -> GameState:
    return new_game(CHESS_RULES)


# --- NEW GAME ---
def test_new_game(chess_game: GameState) -> None:
    assert chess_game.current_player == Color.WHITE
    assert chess_game.status == GameStatus.PLAYING
    assert chess_game.move_history == ()
    assert chess_game.selected_square is None
    assert chess_game.possible_moves == frozenset()
    assert chess_game.board.to_fen(CHESS_RULES) == STARTING_POSITION


def test_new_xiangqi_game() -> None:
    state = new_game(XIANGQI_RULES)
    assert state.current_player == Color.RED
    assert state.status == GameStatus.PLAYING


def test_new_game_needs_both_kings(chess_board: BoardFactory) -> None:
    with pytest.raises(InvariantViolationError):
        new_game(CHESS_RULES, board=chess_board("8/8/8/8/8/8/8/4K3"))
    # explicitly allowed (ex. for analysing a single piece)
    state = new_game(CHESS_RULES, board=chess_board("8/8/8/8/8/8/8/4K3"), check_kings=False)
    assert state.status == GameStatus.PLAYING


def test_new_game_player_must_play_the_variant() -> None:
    with pytest.raises(GameStateError):
        new_game(CHESS_RULES, current_player=Color.RED)


def test_initial_board_does_not_share_the_live_board(chess_game: GameState) -> None:
    assert chess_game.initial_board is not chess_game.board
    chess_game.board.set_piece(square("d1"), None)
    assert chess_game.initial_board is not None
    assert chess_game.initial_board.piece_at(square("d1")) is not None

    undone = undo_move(play(chess_game, "e2e4"))
    assert undone.board.piece_at(square("d1")) is not None


def test_parse_starting_position() -> None:
    board, first_player = parse_starting_position(f"{STARTING_POSITION} b", CHESS_RULES)
    assert board.to_fen(CHESS_RULES) == STARTING_POSITION
    assert first_player == Color.BLACK
    _, first_player = parse_starting_position(STARTING_POSITION, CHESS_RULES)
    assert first_player is None


@pytest.mark.parametrize(
    "text",
    [
        "",
        f"{STARTING_POSITION} x",  # unknown side
        f"{STARTING_POSITION} w Q",  # chess has no pieces in hand
        f"{STARTING_POSITION} w - extra",
    ],
)
def test_parse_starting_position_rejects(text: str) -> None:
    with pytest.raises(InvalidPositionError):
        parse_starting_position(text, CHESS_RULES)


# --- MAKE MOVE ---
def test_accepted_move(chess_game: GameState) -> None:
    after_move = make_move(chess_game, square("e2"), square("e4"))
    assert after_move is not None
    assert after_move.current_player == Color.BLACK
    assert len(after_move.move_history) == 1
    assert after_move.board.piece_at(square("e4")) is not None
    assert after_move.last_move is not None
    assert after_move.last_move.to_square == square("e4")
    assert chess_game.last_move is None
    # the previous state is untouched
    assert chess_game.board.piece_at(square("e4")) is None
    assert chess_game.move_history == ()


@pytest.mark.parametrize(
    "from_name, to_name",
    [
        ("e7", "e5"),  # not your turn
        ("e4", "e5"),  # no piece
        ("e2", "e5"),  # pawns do not move 3 squares
        ("a1", "a3"),  # blocked
        ("e1", "e2"),  # own piece
    ],
)
def test_rejected_moves(chess_game: GameState, from_name: str, to_name: str) -> None:
    assert make_move(chess_game, square(from_name), square(to_name)) is None


def test_move_leaving_the_king_in_check_is_rejected(chess_board: BoardFactory) -> None:
    state = new_game(CHESS_RULES, board=chess_board("4r2k/8/8/8/8/8/4N3/4K3"))
    assert make_move(state, square("e2"), square("c3")) is None
    assert make_move(state, square("e1"), square("d1")) is not None


def test_no_moves_once_the_game_is_over(chess_game: GameState) -> None:
    finished = force_status(chess_game, GameStatus.CHECKMATE)
    assert finished.is_over
    assert make_move(finished, square("e2"), square("e4")) is None


def test_fools_mate(chess_game: GameState) -> None:
    state = play(chess_game, "f2f3", "e7e5", "g2g4", "d8h4")
    assert state.status == GameStatus.CHECKMATE
    assert state.is_over
    assert state.winner == Color.BLACK


def test_check_status(chess_game: GameState) -> None:
    state = play(chess_game, "e2e4", "f7f6", "d1h5")
    assert state.status == GameStatus.CHECK
    assert state.winner is None


def test_threefold_repetition_is_a_draw(chess_game: GameState) -> None:
    shuffle = ["g1f3", "g8f6", "f3g1", "f6g8"]
    state = play(chess_game, *shuffle)
    assert state.status == GameStatus.PLAYING
    state = play(state, *shuffle)
    assert state.status == GameStatus.DRAW
    assert state.winner is None


def test_position_key_ignores_an_en_passant_square_nobody_can_use(chess_game: GameState) -> None:
    state = play(chess_game, "e2e4")
    assert state.board.en_passant_target == square("e3")
    assert position_key(CHESS_RULES, state.board, Color.BLACK) == f"{state.board.to_fen(CHESS_RULES)} b"


def test_position_key_keeps_a_usable_en_passant_square(chess_board: BoardFactory) -> None:
    state = play(new_game(CHESS_RULES, board=chess_board("4k3/8/8/8/3p4/8/4P3/4K3")), "e2e4")
    assert position_key(CHESS_RULES, state.board, Color.BLACK).endswith(" b e3")


def test_repetition_counts_the_position_right_after_a_double_push(chess_game: GameState) -> None:
    shuffle = ["g8f6", "g1f3", "f6g8", "f3g1"]
    state = play(chess_game, "e2e4", *shuffle, *shuffle[:-1])
    assert state.status == GameStatus.PLAYING
    state = play(state, shuffle[-1])
    assert state.status == GameStatus.DRAW


def test_promotion_through_move_text(chess_board: BoardFactory) -> None:
    state = new_game(CHESS_RULES, board=chess_board("4k3/P7/8/8/8/8/8/4K3"))
    state = play(state, "a7a8n")
    knight = state.board.piece_at(square("a8"))
    assert knight is not None and knight.type == PieceType.KNIGHT
    assert state.move_history[-1].to_notation(CHESS_RULES) == "a7a8n"


def test_promotion_letters() -> None:
    assert promotion_from_letter(CHESS_RULES, None) is None
    assert promotion_from_letter(CHESS_RULES, "Q") == PieceType.QUEEN
    with pytest.raises(InvalidNotationError):
        promotion_from_letter(CHESS_RULES, "k")
    with pytest.raises(InvalidNotationError):
        promotion_from_letter(XIANGQI_RULES, "r")


def test_unknown_promotion_piece_is_rejected(chess_board: BoardFactory) -> None:
    state = new_game(CHESS_RULES, board=chess_board("4k3/P7/8/8/8/8/8/4K3"))
    assert make_move(state, square("a7"), square("a8"), PieceType.KING) is None


def test_malformed_move_text(chess_game: GameState) -> None:
    with pytest.raises(InvalidNotationError):
        move_from_notation(chess_game, "e2-e9")


# --- XIANGQI ---
def test_xiangqi_opening_moves() -> None:
    state = play(new_game(XIANGQI_RULES), "h3e3", "h8e8", "b1c3", "b10c8")
    assert state.current_player == Color.RED
    assert state.status == GameStatus.PLAYING


def test_xiangqi_flying_general_move_is_rejected() -> None:
    board = Board.from_fen("4k4/9/9/9/9/9/9/9/9/4K4", XIANGQI_RULES)
    state = new_game(XIANGQI_RULES, board=board, status=GameStatus.PLAYING)
    assert make_move(state, xq("e1"), xq("e2")) is None
    assert make_move(state, xq("e1"), xq("d1")) is not None


# --- SELECTION ---
def test_click_on_own_piece_selects_it(chess_game: GameState) -> None:
    state = select_square(chess_game, square("e2"))
    assert state.selected_square == square("e2")
    assert state.possible_moves == squares("e3", "e4")


@pytest.mark.parametrize("name", ["e4", "e7"])
def test_click_on_empty_or_enemy_square_while_idle(chess_game: GameState, name: str) -> None:
    assert select_square(chess_game, square(name)) is chess_game


def test_click_on_the_selected_square_deselects(chess_game: GameState) -> None:
    state = select_square(select_square(chess_game, square("e2")), square("e2"))
    assert state.selected_square is None
    assert state.possible_moves == frozenset()


def test_click_on_a_destination_moves(chess_game: GameState) -> None:
    state = select_square(select_square(chess_game, square("e2")), square("e4"))
    assert state.current_player == Color.BLACK
    assert state.selected_square is None
    assert len(state.move_history) == 1


def test_failed_move_click_selects_other_own_piece(chess_game: GameState) -> None:
    state = select_square(select_square(chess_game, square("e2")), square("g1"))
    assert state.move_history == ()
    assert state.selected_square == square("g1")
    assert state.possible_moves == squares("f3", "h3")


def test_failed_move_click_on_empty_square_goes_idle(chess_game: GameState) -> None:
    state = select_square(select_square(chess_game, square("e2")), square("e5"))
    assert state.move_history == ()
    assert state.selected_square is None


def test_highlights_exclude_moves_into_check(chess_board: BoardFactory) -> None:
    state = new_game(CHESS_RULES, board=chess_board("4r2k/8/8/8/8/8/4N3/4K3"))
    assert select_square(state, square("e2")).possible_moves == frozenset()


def test_nothing_to_select_after_the_game_ended(chess_game: GameState) -> None:
    finished = declare_draw(chess_game)
    assert select_square(finished, square("e2")).selected_square is None


# --- UNDO / DRAW ---
def test_undo(chess_game: GameState) -> None:
    after_one = play(chess_game, "e2e4")
    after_two = play(after_one, "e7e5")
    undone = undo_move(after_two)
    assert undone.board.to_fen(CHESS_RULES) == after_one.board.to_fen(CHESS_RULES)
    assert undone.current_player == Color.BLACK
    assert undone.move_history == after_one.move_history


def test_undo_without_history(chess_game: GameState) -> None:
    assert undo_move(chess_game) is chess_game


def test_undo_restores_castling(chess_board: BoardFactory) -> None:
    state = new_game(CHESS_RULES, board=chess_board("r3k2r/8/8/8/8/8/8/R3K2R"))
    state = play(state, "e1f1")
    undone = undo_move(state)
    assert make_move(undone, square("e1"), square("g1")) is not None


def test_undo_after_checkmate(chess_game: GameState) -> None:
    state = undo_move(play(chess_game, "f2f3", "e7e5", "g2g4", "d8h4"))
    assert state.status == GameStatus.PLAYING
    assert state.current_player == Color.BLACK


def test_declare_draw(chess_game: GameState) -> None:
    state = declare_draw(chess_game)
    assert state.status == GameStatus.DRAW
    assert state.is_over
    mated = force_status(chess_game, GameStatus.CHECKMATE)
    assert declare_draw(mated) is mated


# --- CONVERSION FROM / TO THE BOUNDARY MODEL ---
def test_game_to_model(chess_game: GameState) -> None:
    state = play(chess_game, "e2e4", "e7e5")
    model = game_to_model(state, {"white": "Alice", "black": "Bob"})
    assert model.variant == "chess"
    assert model.starting_position == f"{STARTING_POSITION} w"
    assert model.moves == ["e2e4", "e7e5"]
    assert model.status == "playing"
    assert model.current_player == "white"
    assert model.players == {"white": "Alice", "black": "Bob"}


def test_model_round_trip(chess_game: GameState) -> None:
    state = play(chess_game, "e2e4", "e7e5", "g1f3")
    restored = game_from_model(game_to_model(state), CHESS_RULES)
    assert restored.board.to_fen(CHESS_RULES) == state.board.to_fen(CHESS_RULES)
    assert restored.current_player == state.current_player
    assert restored.move_history == state.move_history


def test_model_round_trip_from_custom_position(chess_board: BoardFactory) -> None:
    state = new_game(CHESS_RULES, board=chess_board("4k3/8/8/8/8/8/8/R3K3"), current_player=Color.BLACK)
    state = play(state, "e8d8", "a1a8")
    restored = game_from_model(game_to_model(state), CHESS_RULES)
    assert restored.status == GameStatus.CHECK
    assert restored.current_player == Color.BLACK


def test_model_keeps_draw_by_agreement(chess_game: GameState) -> None:
    model = game_to_model(declare_draw(play(chess_game, "e2e4")))
    assert game_from_model(model, CHESS_RULES).status == GameStatus.DRAW


@pytest.mark.parametrize(
    "model",
    [
        GameModel("chess", f"{STARTING_POSITION} w", [], "resigned", "white"),  # unknown status
        GameModel("xiangqi", f"{STARTING_POSITION} w", [], "playing", "white"),  # wrong variant
        GameModel("chess", f"{STARTING_POSITION} x", [], "playing", "white"),  # unknown side
        GameModel("chess", f"{STARTING_POSITION} w", ["e2e5"], "playing", "black"),  # corrupt history
    ],
)
def test_invalid_models(model: GameModel) -> None:
    with pytest.raises(GameStateError):
        game_from_model(model, CHESS_RULES)


# --- SESSION ---
def test_session_click_flow() -> None:
    session = GameSession(CHESS_RULES)
    session.click(square("g1"))
    assert session.state.possible_moves == squares("f3", "h3")
    session.click(square("f3"))
    assert session.state.current_player == Color.BLACK
    assert session.state.board.piece_at(square("f3")) is not None


def test_session_moves() -> None:
    session = GameSession(CHESS_RULES)
    assert session.move(square("e2"), square("e4"))
    assert not session.move(square("e2"), square("e4"))  # nothing there anymore
    assert session.move_notation("e7-e5")
    assert not session.move_notation("e1e3")
    assert len(session.state.move_history) == 2
    with pytest.raises(InvalidNotationError):
        session.move_notation("nonsense")


def test_session_undo_and_reset() -> None:
    session = GameSession(XIANGQI_RULES)
    assert session.move_notation("h3e3")
    assert session.move_notation("h10g8")
    session.undo()
    assert len(session.state.move_history) == 1
    session.reset()
    assert session.state.move_history == ()
    assert session.state.current_player == Color.RED


def test_session_legal_moves_for() -> None:
    session = GameSession(CHESS_RULES)
    assert session.legal_moves_for(square("b1")) == squares("a3", "c3")
    assert session.legal_moves_for(square("b8")) == set()  # not black's turn
    assert session.legal_moves_for(square("e4")) == set()


def test_session_winner() -> None:
    session = GameSession(CHESS_RULES)
    for text in ["f2f3", "e7e5", "g2g4", "d8h4"]:
        assert session.move_notation(text)
    assert session.is_over
    assert session.winner == Color.BLACK
    assert session.legal_moves_for(square("e1")) == set()


def test_session_draw() -> None:
    session = GameSession(CHESS_RULES)
    session.declare_draw()
    assert session.is_over
    assert session.winner is None


def test_session_from_state(chess_board: BoardFactory) -> None:
    state = new_game(CHESS_RULES, board=chess_board("k7/2Q5/1K6/8/8/8/8/8"), current_player=Color.BLACK)
    session = GameSession(CHESS_RULES, state)
    assert session.state.status == GameStatus.STALEMATE
    assert session.is_over
    assert session.state.rules.variant == Variant.CHESS
