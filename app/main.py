'''
Pokedle API

Endpoints:
GET  /puzzle               -> today's puzzle state & history (restored if already started)
POST /puzzle/guess         -> submit a guess by name
GET  /puzzle/share         -> emoji share text, once the game is over

Extras:
GET  /health               -> liveness check

Every endpoint takes ?player=<id> (default "anonymous"); each player has
one session per puzzle day.
'''

import logging
from functools import lru_cache

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware

from .app_logging import configure_logging
from .bootstrap_db import create_all    # dev-only: create tables
from .config import APP_ENV, UNIVERSE_SIZE
from .db import get_db                  # SQLAlchemy Session dependency
from .errors import InvalidGuess, LookupUnavailable, NotFound
from .game import DailyGame, InFlight, Session, history_out, secret_out, share_text
from .pokeapi_client import EntityLookup, PokeApiLookup
from .repository import DBSessionStore  # DB-backed store
from .schemas import GuessRequest, PuzzleState, ShareOut
from .seed import daily_key, time_until_midnight

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Pokedle API", version="1.0.0")

# Allow everything in dev so the docs and front-end work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# --- Dev convenience: auto-create tables locally ---
if APP_ENV == "local":
    @app.on_event("startup")
    def _dev_create_tables():
        create_all()

# Guesses resolving right now, across all requests
in_flight = InFlight()

# ---------------- Dependencies ----------------

@lru_cache
def get_lookup() -> EntityLookup:
    # one client for the whole process so the name list is fetched once
    return PokeApiLookup(universe_size=UNIVERSE_SIZE)

def get_day_key() -> int:
    return daily_key()

def get_game(
    player: str = "anonymous",
    db = Depends(get_db),
    lookup: EntityLookup = Depends(get_lookup),
) -> DailyGame:
    return DailyGame(DBSessionStore(db), lookup, UNIVERSE_SIZE, player=player, in_flight=in_flight)

def get_session(
    game: DailyGame = Depends(get_game),
    day_key: int = Depends(get_day_key),
) -> Session:
    try:
        return game.start(day_key)
    except NotFound:
        logger.error("Secret for %s is missing from the lookup", day_key)
        raise HTTPException(status_code=500, detail="Today's Pokemon could not be loaded")
    except LookupUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc))

def to_state(session: Session) -> PuzzleState:
    return PuzzleState(
        day_key=session.day_key,
        status=session.status,
        guesses_left=session.guesses_left,
        history=history_out(session),
        secret=secret_out(session),
        next_puzzle_in=time_until_midnight(),
    )

# ---------------- Routes ----------------

@app.get("/puzzle", response_model=PuzzleState, summary="Get today's puzzle state")
def get_puzzle(session: Session = Depends(get_session)) -> PuzzleState:
    return to_state(session)

@app.post("/puzzle/guess", response_model=PuzzleState, summary="Submit a guess")
def submit_guess(
    payload: GuessRequest,
    game: DailyGame = Depends(get_game),
    session: Session = Depends(get_session),
) -> PuzzleState:
    try:
        updated = game.guess_by_name(session, payload.name)
    except NotFound:
        raise HTTPException(status_code=404, detail=f"Unknown Pokemon: {payload.name}")
    except InvalidGuess as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except LookupUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return to_state(updated)

@app.get("/puzzle/share", response_model=ShareOut, summary="Share text for a finished game")
def get_share(session: Session = Depends(get_session)) -> ShareOut:
    if not session.is_over:
        raise HTTPException(status_code=409, detail="Game still in progress.")
    return ShareOut(text=share_text(session))

@app.get("/health", summary="Liveness check")
def health() -> dict:
    return {"status": "ok"}
