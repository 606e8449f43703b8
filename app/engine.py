"""
Pure game logic (no HTTP, no storage).
We compare a guessed Pokemon with the secret one, attribute by attribute:
- name: exact match (the only way to win)
- primary / secondary type: correct, partial (type is in the secret but in the other slot) or wrong
- generation, height, weight, base stat total: correct, or a direction
- color: exact match

Direction convention: "higher" means the SECRET's value is greater than the guess's,
"lower" means it is smaller. The same rule is used for all four numeric attributes.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .types import CategoryResult, Direction, EntityId

Number = Union[int, float]


@dataclass(frozen=True)
class Entity:
    id: EntityId
    name: str
    primary_category: str
    secondary_category: Optional[str]  # None = single-type, not an empty type
    generation_band: int
    size: Number   # height, decimetres
    mass: Number   # weight, hectograms
    color_class: str
    composite_score: int  # base stat total
    is_legendary: bool = False
    is_mythical: bool = False
    # presentation only, never compared
    habitat: str = "unknown"
    sprite: Optional[str] = None

    @property
    def categories(self) -> set:
        found = {self.primary_category}
        if self.secondary_category is not None:
            found.add(self.secondary_category)
        return found


@dataclass(frozen=True)
class Verdict:
    name_match: bool
    primary_category: CategoryResult
    secondary_category: CategoryResult
    generation: Direction
    size: Direction
    mass: Direction
    composite_score: Direction
    color_match: bool


def compare_primary(guess: Entity, secret: Entity) -> CategoryResult:
    if guess.primary_category == secret.primary_category:
        return "correct"
    if guess.primary_category in secret.categories:
        return "partial"
    return "wrong"


def compare_secondary(guess: Entity, secret: Entity) -> CategoryResult:
    """
    Examples (guess vs secret):
      (none) vs (none)          -> correct
      flying vs flying          -> correct
      grass  vs grass/poison    -> partial (secret has it as primary)
      poison vs grass/flying    -> wrong
      (none) vs flying          -> wrong (missing is not a match for a real type)
    """
    if guess.secondary_category is None and secret.secondary_category is None:
        return "correct"
    if guess.secondary_category is None:
        return "wrong"
    if guess.secondary_category == secret.secondary_category:
        return "correct"
    if guess.secondary_category in secret.categories:
        return "partial"
    return "wrong"


def compare_number(guess_value: Number, secret_value: Number) -> Direction:
    if guess_value == secret_value:
        return "correct"
    if guess_value > secret_value:
        return "lower"
    return "higher"


def compare(guess: Entity, secret: Entity) -> Verdict:
    """
    Every attribute is computed on its own; no result depends on another.
    compare(a, a) is all-correct with name_match=True.
    """
    return Verdict(
        name_match=guess.name == secret.name,
        primary_category=compare_primary(guess, secret),
        secondary_category=compare_secondary(guess, secret),
        generation=compare_number(guess.generation_band, secret.generation_band),
        size=compare_number(guess.size, secret.size),
        mass=compare_number(guess.mass, secret.mass),
        composite_score=compare_number(guess.composite_score, secret.composite_score),
        color_match=guess.color_class == secret.color_class,
    )


def is_win(verdict: Verdict) -> bool:
    """Win = the names match. Nothing else counts."""
    return verdict.name_match
