"""Domain models: content definitions and immutable runtime state."""
