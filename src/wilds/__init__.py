"""Whispering Wilds: deterministic game-logic core for a narrative text adventure."""

__version__ = "0.3.0"

__all__ = ["__version__"]
