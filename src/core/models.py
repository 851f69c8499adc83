"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

# Type aliases to make GameModel easier to read
PieceColor = str
PlayerName = str


@dataclass
class GameModel:
    """Transport-safe representation of a game used between API, Service, DB, and engine layers.

    The position is stored as the starting position + the list of moves played since.
    The engine replays those moves to reconstruct the current state.
    """

    variant: str
    starting_position: str
    moves: list[str]
    status: str
    current_player: PieceColor
    players: dict[PieceColor, PlayerName] = field(default_factory=dict)
    opponent_id: Optional[str] = None


@dataclass
class GameResultModel:
    """Outcome of a finished game. Recorded once the status reaches a terminal value."""

    game_id: str
    variant: str
    result: str
    winner: Optional[PieceColor]
    opponent_id: Optional[str]
    timestamp: datetime
