"""
Daily session state machine.

A Session is one player's game for one puzzle day:
- in_progress -> won   (a guess matched the secret's name)
- in_progress -> lost  (MAX_GUESSES guesses without a match)
Won and lost are final. History only grows, names never repeat.

Sessions are saved under a key that embeds the day key, so yesterday's game
is never picked up today. The session object is passed around explicitly;
nothing here keeps a "current game".
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from threading import RLock
from typing import Optional, Tuple

from pydantic import ValidationError

from .engine import Entity, Verdict, compare, is_win
from .errors import InvalidGuess, PersistenceCorrupt
from .pokeapi_client import EntityLookup
from .schemas import EntityOut, GuessRecordOut, SessionSnapshot, VerdictOut
from .seed import daily_key, select_secret_index
from .store import KeyValueStore
from .types import GameStatus, MAX_GUESSES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuessRecord:
    entity: Entity
    verdict: Verdict


@dataclass
class Session:
    day_key: int
    secret: Entity
    history: Tuple[GuessRecord, ...] = ()
    status: GameStatus = "in_progress"
    # set while a guess is being resolved by the lookup; never saved
    lookup_in_flight: bool = field(default=False, compare=False)

    @property
    def guesses_left(self) -> int:
        return MAX_GUESSES - len(self.history)

    @property
    def guessed_names(self) -> set:
        return {record.entity.name for record in self.history}

    @property
    def is_over(self) -> bool:
        return self.status != "in_progress"


# --- Snapshot converters (dataclasses <-> pydantic) ---

def _entity_to_out(entity: Entity) -> EntityOut:
    return EntityOut(
        id=entity.id,
        name=entity.name,
        primary_category=entity.primary_category,
        secondary_category=entity.secondary_category,
        generation_band=entity.generation_band,
        size=entity.size,
        mass=entity.mass,
        color_class=entity.color_class,
        composite_score=entity.composite_score,
        is_legendary=entity.is_legendary,
        is_mythical=entity.is_mythical,
        habitat=entity.habitat,
        sprite=entity.sprite,
    )


def _record_to_out(record: GuessRecord) -> GuessRecordOut:
    verdict = record.verdict
    return GuessRecordOut(
        entity=_entity_to_out(record.entity),
        verdict=VerdictOut(
            name_match=verdict.name_match,
            primary_category=verdict.primary_category,
            secondary_category=verdict.secondary_category,
            generation=verdict.generation,
            size=verdict.size,
            mass=verdict.mass,
            composite_score=verdict.composite_score,
            color_match=verdict.color_match,
        ),
    )


def _record_from_out(out: GuessRecordOut) -> GuessRecord:
    return GuessRecord(
        entity=Entity(**out.entity.model_dump()),
        verdict=Verdict(**out.verdict.model_dump()),
    )


def to_snapshot(session: Session) -> SessionSnapshot:
    return SessionSnapshot(
        day_key=session.day_key,
        secret_id=session.secret.id,
        status=session.status,
        history=[_record_to_out(r) for r in session.history],
    )


def history_out(session: Session) -> list:
    return [_record_to_out(r) for r in session.history]


def secret_out(session: Session) -> Optional[EntityOut]:
    """The secret is only revealed once the game is over."""
    if session.is_over:
        return _entity_to_out(session.secret)
    return None


def _check_snapshot(snapshot: SessionSnapshot) -> None:
    """Reject snapshots that break the session rules instead of loading them."""
    names = [r.entity.name for r in snapshot.history]
    wins = [r for r in snapshot.history if r.verdict.name_match]
    if len(names) > MAX_GUESSES:
        raise PersistenceCorrupt(f"{len(names)} guesses stored, at most {MAX_GUESSES} allowed")
    if len(set(names)) != len(names):
        raise PersistenceCorrupt("Duplicate guess in stored history")
    if wins:
        expected = "won"
    elif len(names) == MAX_GUESSES:
        expected = "lost"
    else:
        expected = "in_progress"
    if snapshot.status != expected:
        raise PersistenceCorrupt(f"Stored status {snapshot.status!r} does not match history ({expected!r})")


class InFlight:
    """Storage keys with a guess currently being resolved. Shared across requests."""

    def __init__(self) -> None:
        self._keys: set = set()
        self._lock = RLock()

    def acquire(self, key: str) -> bool:
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def release(self, key: str) -> None:
        with self._lock:
            self._keys.discard(key)


class DailyGame:
    """
    Drives one player's daily games:
    - start(day_key)            -> Session (restored or fresh)
    - restore(day_key)          -> Session | None
    - submit_guess(session, e)  -> Session (raises InvalidGuess)
    - guess_by_name(session, n) -> Session (raises InvalidGuess / NotFound)
    - persist(session)
    """

    def __init__(
        self,
        store: KeyValueStore,
        lookup: EntityLookup,
        universe_size: int,
        player: str = "anonymous",
        in_flight: Optional[InFlight] = None,
    ):
        if universe_size <= 0:
            raise ValueError("Universe size must be a positive integer.")
        self.store = store
        self.lookup = lookup
        self.universe_size = universe_size
        self.player = player
        self.in_flight = in_flight if in_flight is not None else InFlight()

    def storage_key(self, day_key: int) -> str:
        return f"pokedle-{self.player}-{day_key}"

    def secret_for(self, day_key: int) -> Entity:
        return self.lookup.resolve(select_secret_index(day_key, self.universe_size))

    # --- Persistence ---

    def persist(self, session: Session) -> None:
        payload = to_snapshot(session).model_dump_json()
        self.store.set(self.storage_key(session.day_key), payload)

    def load_snapshot(self, day_key: int) -> Optional[SessionSnapshot]:
        """
        Returns None when nothing is stored for this day.
        Raises PersistenceCorrupt when something is stored but unreadable.
        """
        raw = self.store.get(self.storage_key(day_key))
        if raw is None:
            return None
        try:
            snapshot = SessionSnapshot.model_validate_json(raw)
        except ValidationError as exc:
            raise PersistenceCorrupt(f"Stored session for {day_key} is unreadable") from exc
        if snapshot.day_key != day_key:
            return None
        _check_snapshot(snapshot)
        return snapshot

    def restore(self, day_key: int, secret: Optional[Entity] = None) -> Optional[Session]:
        try:
            snapshot = self.load_snapshot(day_key)
        except PersistenceCorrupt as exc:
            logger.warning("Ignoring saved session %s: %s", self.storage_key(day_key), exc)
            return None
        if snapshot is None:
            return None

        if secret is None:
            secret = self.secret_for(day_key)
        if secret.id != snapshot.secret_id:
            # universe size changed since this was saved; the old game no longer applies
            logger.warning(
                "Saved session %s has secret %s, today's is %s; starting fresh",
                self.storage_key(day_key), snapshot.secret_id, secret.id,
            )
            return None

        return Session(
            day_key=day_key,
            secret=secret,
            history=tuple(_record_from_out(r) for r in snapshot.history),
            status=snapshot.status,
        )

    def start(self, day_key: Optional[int] = None) -> Session:
        if day_key is None:
            day_key = daily_key()
        secret = self.secret_for(day_key)
        session = self.restore(day_key, secret=secret)
        if session is None:
            logger.info("New session %s", self.storage_key(day_key))
            session = Session(day_key=day_key, secret=secret)
        return session

    # --- Guessing ---

    def _check_can_guess(self, session: Session, name: str) -> None:
        if session.is_over:
            raise InvalidGuess(f"Game {session.status}. No more guesses allowed.")
        if name in session.guessed_names:
            raise InvalidGuess(f"{name} was already guessed.")

    def submit_guess(self, session: Session, guess: Entity) -> Session:
        """
        Append one resolved guess. The new state is written to the store first
        and only then applied to `session`, so a failed write changes nothing.
        """
        self._check_can_guess(session, guess.name)

        verdict = compare(guess, session.secret)
        history = session.history + (GuessRecord(entity=guess, verdict=verdict),)
        if is_win(verdict):
            status = "won"
        elif len(history) >= MAX_GUESSES:
            status = "lost"
        else:
            status = "in_progress"

        self.persist(replace(session, history=history, status=status))

        session.history = history
        session.status = status
        if status != "in_progress":
            logger.info("Session %s %s after %d guess(es)", self.storage_key(session.day_key), status, len(history))
        return session

    def guess_by_name(self, session: Session, name: str) -> Session:
        """
        Resolve a name through the lookup, then submit it.
        Only one guess may be resolving at a time for a given day.
        """
        name = name.strip().lower()
        key = self.storage_key(session.day_key)
        if session.lookup_in_flight:
            raise InvalidGuess("A guess is already being resolved.")
        self._check_can_guess(session, name)
        if not self.in_flight.acquire(key):
            raise InvalidGuess("A guess is already being resolved.")
        session.lookup_in_flight = True

        try:
            # another request may have saved a guess since this session was loaded
            latest = self.restore(session.day_key, secret=session.secret)
            if latest is not None:
                session.history = latest.history
                session.status = latest.status
            self._check_can_guess(session, name)

            entity = self.lookup.resolve(self.lookup.resolve_by_name(name))
            return self.submit_guess(session, entity)
        finally:
            session.lookup_in_flight = False
            self.in_flight.release(key)


# --- Share text ---

GREEN = "\U0001F7E9"
YELLOW = "\U0001F7E8"
BLACK = "⬛"


def _square(result) -> str:
    if result is True or result == "correct":
        return GREEN
    if result == "partial":
        return YELLOW
    return BLACK


def share_text(session: Session) -> str:
    """
    Example:
      Pokedle 2024-01-15 3/6

      🟨⬛🟩⬛⬛⬛
      ...
    """
    puzzle_day = date(session.day_key // 10000, (session.day_key // 100) % 100, session.day_key % 100)
    score = str(len(session.history)) if session.status == "won" else "X"
    rows = []
    for record in session.history:
        v = record.verdict
        cells = [v.primary_category, v.generation, v.size, v.mass, v.color_match, v.composite_score]
        rows.append("".join(_square(c) for c in cells))
    return f"Pokedle {puzzle_day.isoformat()} {score}/{MAX_GUESSES}\n\n" + "\n".join(rows)
