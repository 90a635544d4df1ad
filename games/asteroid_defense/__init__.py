"""
Asteroid defense game package entry.
Expose Game so the launcher can import it as a module and find the class.
"""

from .game import AsteroidDefenseGame as Game

__all__ = ["Game"]
