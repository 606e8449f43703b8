"""
DB-backed key/value store with the same get/set API as the in-memory MemoryStore.

Why: lets the game switch from memory to a database without changing DailyGame.
Each set() commits, so a guess is either fully saved or not saved at all.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import StoredSession

logger = logging.getLogger(__name__)


class DBSessionStore:
    """Drop-in replacement for MemoryStore, backed by the puzzle_sessions table."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.get(StoredSession, key)
        if not row:
            return None
        return row.value

    def set(self, key: str, value: str) -> None:
        try:
            row = self.db.get(StoredSession, key)
            if row is None:
                self.db.add(StoredSession(key=key, value=value, updated_at=datetime.utcnow()))
            else:
                row.value = value
                row.updated_at = datetime.utcnow()
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Could not save session %s", key)
            self.db.rollback()
            raise
