"""
Labels for clarity.
"""

from typing import Literal

EntityId = int  # 1 -> universe size
GameStatus = Literal["in_progress", "won", "lost"]
CategoryResult = Literal["correct", "partial", "wrong"]
Direction = Literal["correct", "higher", "lower"]

# Fixed guess budget; never derived from entity data
MAX_GUESSES = 6
