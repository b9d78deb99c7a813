"""Factory helpers for runtime state."""

from .state_factory import create_initial_state

__all__ = ["create_initial_state"]
