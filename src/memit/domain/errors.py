"""
Error taxonomy for memit.

Every error carries an ErrorKind so the calling layer can localize the
message itself. Empty study queues are not errors and have no entry here.
"""

from enum import Enum


class ErrorKind(str, Enum):
    UNKNOWN = "unknown"
    INVALID_STATE = "invalid_state"
    INVALID_CARD = "invalid_card"
    CARD_NOT_FOUND = "card_not_found"
    DECK_NOT_FOUND = "deck_not_found"
    FILE_NOT_FOUND = "file_not_found"
    ENCODING_ERROR = "encoding_error"
    PARSING_ERROR = "parsing_error"
    INVALID_FORMAT = "invalid_format"
    FIELD_TOO_LONG = "field_too_long"
    TOO_MANY_ROWS = "too_many_rows"
    EMPTY_DECK = "empty_deck"
    STORE_ERROR = "store_error"


class MemitError(Exception):
    """Base class for all memit errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str = "", kind: ErrorKind | None = None):
        super().__init__(message or self.__class__.__name__)
        if kind is not None:
            self.kind = kind


class InvalidSessionStateError(MemitError):
    """A session runner call was made in a state that does not allow it."""

    kind = ErrorKind.INVALID_STATE

    def __init__(self, operation: str, state: str):
        super().__init__(f"Cannot {operation} while session is {state}")
        self.operation = operation
        self.state = state


class CardValidationError(MemitError):
    kind = ErrorKind.INVALID_CARD


class CardNotFoundError(MemitError):
    kind = ErrorKind.CARD_NOT_FOUND

    def __init__(self, card_id: str):
        super().__init__(f"Card not found: {card_id}")
        self.card_id = card_id


class DeckNotFoundError(MemitError):
    kind = ErrorKind.DECK_NOT_FOUND

    def __init__(self, deck_id: str):
        super().__init__(f"Deck not found: {deck_id}")
        self.deck_id = deck_id


class CardImportError(MemitError):
    """
    Delimited-text import failure.

    Attributes:
        line: 1-based line number in the source file, when known.
        field: Name of the offending field ("front" or "back"), when known.
        length: Length of the offending field, or row count for too_many_rows.
    """

    kind = ErrorKind.PARSING_ERROR

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        line: int | None = None,
        field: str | None = None,
        length: int | None = None,
    ):
        super().__init__(message or kind.value, kind=kind)
        self.line = line
        self.field = field
        self.length = length


class CardExportError(MemitError):
    kind = ErrorKind.EMPTY_DECK


class StoreError(MemitError):
    kind = ErrorKind.STORE_ERROR
