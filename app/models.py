"""
SQLAlchemy ORM models.

Tables:
- puzzle_sessions: one row per storage key ("pokedle-{player}-{day_key}"),
  value is the JSON snapshot written by DailyGame.persist

Why one text column?
- The game only needs get/set by key; the snapshot format is owned by schemas.py.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from .db import Base

class StoredSession(Base):
    __tablename__ = "puzzle_sessions"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)

    # SessionSnapshot as JSON text
    value: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
