"""
- Entity lookup: turns a catalog index or a name into a full Pokemon.
Two implementations with the same methods:
- PokeApiLookup: HTTP calls to pokeapi.co (pokemon + pokemon-species)
- CatalogLookup: a fixed in-memory list (tests, offline play)

Unknown ids/names raise NotFound. Anything else going wrong with the
network raises LookupUnavailable so the caller can retry later.
"""

import logging
from threading import Lock
from typing import Dict, Iterable, List, Protocol

import requests

from .config import POKEAPI_TIMEOUT, POKEAPI_URL
from .engine import Entity
from .errors import LookupUnavailable, NotFound
from .types import EntityId

logger = logging.getLogger(__name__)

# Last National Dex number of each generation
GENERATION_BOUNDS = [151, 251, 386, 493, 649, 721, 809, 905]


def generation_for_id(entity_id: EntityId) -> int:
    """Generation band for a dex number: 1..151 -> 1, 152..251 -> 2, ..., 906+ -> 9."""
    generation = 1
    for bound in GENERATION_BOUNDS:
        if entity_id <= bound:
            return generation
        generation += 1
    return generation


class EntityLookup(Protocol):
    def resolve(self, entity_id: EntityId) -> Entity: ...

    def resolve_by_name(self, name: str) -> EntityId: ...


class CatalogLookup:
    def __init__(self, entities: Iterable[Entity]):
        self._by_id: Dict[EntityId, Entity] = {}
        self._by_name: Dict[str, EntityId] = {}
        for entity in entities:
            self._by_id[entity.id] = entity
            self._by_name[entity.name.lower()] = entity.id

    def resolve(self, entity_id: EntityId) -> Entity:
        entity = self._by_id.get(entity_id)
        if entity is None:
            raise NotFound(f"No Pokemon with id {entity_id}")
        return entity

    def resolve_by_name(self, name: str) -> EntityId:
        entity_id = self._by_name.get(name.strip().lower())
        if entity_id is None:
            raise NotFound(f"No Pokemon named {name!r}")
        return entity_id


class PokeApiLookup:
    def __init__(self, base_url: str = POKEAPI_URL, universe_size: int = 386, timeout: float = POKEAPI_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.universe_size = universe_size
        self.timeout = timeout
        self.http = requests.Session()
        self._names: Dict[str, EntityId] = {}
        self._names_lock = Lock()

    def _get_json(self, path: str) -> dict:
        url = f"{self.base_url}/{path}"
        try:
            response = self.http.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("PokeAPI request failed: %s (%s)", url, exc)
            raise LookupUnavailable(f"Could not reach {url}") from exc

        if response.status_code == 404:
            raise NotFound(f"{path} not found")
        try:
            # If the response was not 200 OK, this will raise an error
            response.raise_for_status()
            return response.json()
        except (requests.HTTPError, ValueError) as exc:
            logger.warning("PokeAPI bad response: %s (%s)", url, exc)
            raise LookupUnavailable(f"Bad response from {url}") from exc

    def all_names(self) -> List[dict]:
        data = self._get_json(f"pokemon?limit={self.universe_size}")
        # the list comes back in dex order, so position = id
        names = []
        i = 0
        while i < len(data["results"]):
            names.append({"name": data["results"][i]["name"], "id": i + 1})
            i += 1
        return names

    def resolve(self, entity_id: EntityId) -> Entity:
        pokemon = self._get_json(f"pokemon/{entity_id}")
        species = self._get_json(f"pokemon-species/{entity_id}")
        return entity_from_api(entity_id, pokemon, species)

    def resolve_by_name(self, name: str) -> EntityId:
        name = name.strip().lower()
        if not self._names:
            with self._names_lock:
                # built aside and swapped in whole; readers never see a half-filled dict
                if not self._names:
                    self._names = {item["name"]: item["id"] for item in self.all_names()}
        entity_id = self._names.get(name)
        if entity_id is None:
            raise NotFound(f"No Pokemon named {name!r}")
        return entity_id


def entity_from_api(entity_id: EntityId, pokemon: dict, species: dict) -> Entity:
    """Build an Entity from the two PokeAPI payloads."""
    types = [t["type"]["name"] for t in sorted(pokemon["types"], key=lambda t: t["slot"])]
    base_stat_total = sum(s["base_stat"] for s in pokemon["stats"])
    sprites = pokemon.get("sprites") or {}
    artwork = ((sprites.get("other") or {}).get("official-artwork") or {}).get("front_default")
    color = species.get("color") or {}
    habitat = species.get("habitat") or {}

    return Entity(
        id=entity_id,
        name=pokemon["name"],
        primary_category=types[0],
        secondary_category=types[1] if len(types) > 1 else None,
        generation_band=generation_for_id(entity_id),
        size=pokemon["height"],
        mass=pokemon["weight"],
        color_class=color.get("name", "unknown"),
        composite_score=base_stat_total,
        is_legendary=bool(species.get("is_legendary")),
        is_mythical=bool(species.get("is_mythical")),
        habitat=habitat.get("name", "unknown"),
        sprite=artwork or sprites.get("front_default"),
    )
