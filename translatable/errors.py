"""Exceptions raised by translatable."""


class TranslatableError(Exception):
    """Base class for translatable errors."""


class NotBoundError(TranslatableError, LookupError):
    """Raised when locale settings are requested for a model that was never bound.

    Attributes:
        model: Name of the model
    """

    def __init__(self, model: str) -> None:
        self.model = model
        super().__init__(f"Model {model!r} is not bound to translatable")


class StoreError(TranslatableError, ValueError):
    """Raised when a document store is asked for something it cannot do."""


MISSING_LOCALE = "Locale has not been set."
"""Error message attached to ``locale`` when a save carries no locale."""
