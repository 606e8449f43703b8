"""
Explicit validation & Pydantic models
- Stored session snapshots (what we write to the keyed store and read back)
- API requests and responses
A snapshot that does not validate is treated as "no saved session".
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator


# 1. One Pokemon, as stored and as returned to clients
class EntityOut(BaseModel):
    id: int = Field(..., ge=1, description="Catalog index (National Dex number)")
    name: str = Field(..., min_length=1)
    primary_category: str = Field(..., description="First type")
    secondary_category: Optional[str] = Field(None, description="Second type, null when single-typed")
    generation_band: int = Field(..., ge=1)
    size: int | float = Field(..., ge=0, description="Height in decimetres")
    mass: int | float = Field(..., ge=0, description="Weight in hectograms")
    color_class: str
    composite_score: int = Field(..., ge=0, description="Base stat total")
    is_legendary: bool = False
    is_mythical: bool = False
    habitat: str = "unknown"
    sprite: Optional[str] = None


# 2. Per-attribute feedback for one guess
class VerdictOut(BaseModel):
    name_match: bool
    primary_category: Literal["correct", "partial", "wrong"]
    secondary_category: Literal["correct", "partial", "wrong"]
    generation: Literal["correct", "higher", "lower"]
    size: Literal["correct", "higher", "lower"]
    mass: Literal["correct", "higher", "lower"]
    composite_score: Literal["correct", "higher", "lower"]
    color_match: bool


# 3. A guess and its feedback
class GuessRecordOut(BaseModel):
    entity: EntityOut
    verdict: VerdictOut


# 4. What we persist per puzzle day
class SessionSnapshot(BaseModel):
    day_key: int = Field(..., description="yyyymmdd of the puzzle day")
    secret_id: int = Field(..., ge=1, description="Stored for reference; re-derivable from day_key")
    status: Literal["in_progress", "won", "lost"]
    history: List[GuessRecordOut] = Field(default_factory=list)

    @field_validator("day_key")
    @classmethod
    def validate_day_key(cls, value: int) -> int:
        """yyyymmdd with a real month and day range."""
        month = (value // 100) % 100
        day = value % 100
        if value < 10000 or month < 1 or month > 12 or day < 1 or day > 31:
            raise ValueError(f"Malformed day key: {value}")
        return value


# 5. Player submits a guess by name
class GuessRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Pokemon name, case-insensitive")

    # runs before min_length, so "   " is rejected as empty
    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, name):
        if isinstance(name, str):
            return name.strip().lower()
        return name

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "pikachu"},
                {"name": "Bulbasaur"},
            ]
        }
    }


# 6. Current state of today's puzzle
class PuzzleState(BaseModel):
    day_key: int = Field(..., description="Puzzle day identifier")
    status: Literal["in_progress", "won", "lost"] = Field(..., description="Current state of the game")
    guesses_left: int = Field(..., description="How many guesses remain")
    history: List[GuessRecordOut] = Field(..., description="All guesses made so far with feedback")
    secret: EntityOut | None = Field(None, description="Today's Pokemon (only revealed once the game is over)")
    next_puzzle_in: str = Field(..., description="Time until the next puzzle, e.g. '5h 12m'")


# 7. Share text, only once the game is over
class ShareOut(BaseModel):
    text: str
