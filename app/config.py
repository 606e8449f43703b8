"""
Single place to read settings from the environment.
A local .env is loaded first (dev convenience; in prod the platform injects env vars).
"""

import os

from dotenv import load_dotenv

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "local")

# SQLite by default so the game runs without any setup
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+pysqlite:///./pokedle.db")

# Catalog bound: Gen 1-3. Changing it changes which puzzles are reachable.
UNIVERSE_SIZE = int(os.getenv("POKEDLE_UNIVERSE_SIZE", "386"))

POKEAPI_URL = os.getenv("POKEAPI_URL", "https://pokeapi.co/api/v2")
POKEAPI_TIMEOUT = float(os.getenv("POKEAPI_TIMEOUT", "5.0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
