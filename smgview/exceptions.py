"""Custom exceptions for semantic memory graph operations."""


class SMGError(Exception):
    """Base exception for graph operations."""

    pass


class ParseError(SMGError):
    """Raised when a graph document cannot be parsed.

    The previously loaded graph, if any, is left untouched.
    """

    pass


class ValidationFailed(SMGError):
    """Raised when a graph is saved while validation reports errors."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Graph has {len(errors)} validation error(s)")


class NoteNotFoundError(SMGError, KeyError):
    """Raised when a note id is not present in the graph."""

    def __init__(self, note_id: int):
        self.note_id = note_id
        super().__init__(f"Note {note_id} not found")

    def __str__(self) -> str:
        return self.args[0]
