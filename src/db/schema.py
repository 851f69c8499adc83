"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    variant: Mapped[str]
    starting_position: Mapped[str]
    moves: Mapped[list[str]] = mapped_column(JSON, default=list)
    players: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)
    opponent_id: Mapped[Optional[str]]
    current_player: Mapped[str]
    status: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


class DBGameResult(Base):
    """One row per finished game"""

    __tablename__ = "game_results"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    game_id: Mapped[str] = mapped_column(index=True)
    variant: Mapped[str]
    result: Mapped[str]
    winner: Mapped[Optional[str]]
    opponent_id: Mapped[Optional[str]]
    timestamp: Mapped[datetime] = mapped_column(default=utc_now)
