"""Custom exceptions for the flashcard store and quiz session."""


class FiszkiError(Exception):
    """Base exception for the flashcard bot."""
    pass


class StorageError(FiszkiError):
    """Flashcard store operation failed."""
    pass


class StorageUnavailable(StorageError):
    """Database cannot be opened, read or written."""
    pass


class SelectionLockedError(FiszkiError):
    """An answer was already selected for this flashcard."""
    pass
