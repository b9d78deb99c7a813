"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime state cannot be created from the content tables."""


class SaveLoadError(Exception):
    """Raised when a persisted snapshot cannot be restored."""
