"""Note domain models and helpers for the raw note JSON shape."""

import math
from typing import Any, Iterator

from pydantic import BaseModel


def is_note_id(value: Any) -> bool:
    """True for JSON integers (booleans excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_score(value: Any) -> bool:
    """True for finite JSON numbers (booleans excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_related_link(entry: Any) -> bool:
    """True if entry is shaped like ``[target_note_id, score]``."""
    return (
        isinstance(entry, list)
        and len(entry) == 2
        and is_note_id(entry[0])
        and is_score(entry[1])
    )


def iter_related_links(note: dict) -> Iterator[tuple[int, float]]:
    """Yield the well-formed ``(target_id, score)`` pairs of a note, in stored order."""
    related = note.get("related_note_links")
    if not isinstance(related, list):
        return
    for entry in related:
        if is_related_link(entry):
            yield entry[0], float(entry[1])


class NoteSummary(BaseModel):
    """A single row of the note list."""

    note_id: int
    snippet: str
    related_count: int
    inbound_count: int
    cluster: int | None = None


class NoteDetail(BaseModel):
    """Everything the editor shows for one note.

    Attributes:
        note_id: The note's id
        context: Editable context text
        raw_content: Editable raw content
        related_links_text: Related links rendered as ``id:score`` tokens
        embedding_dim: Length of the (read-only) embedding
        norm: Stored embedding norm, if any
        source_turns: Number of source turn ids
        source_commits: Short (8 char) commit ids, empty/None entries skipped
        source_dates: ISO dates of the source timestamps
        inbound_count: Number of notes linking to this note
        outbound_count: Number of stored related links
        cluster: Cluster label, if the note has one
    """

    note_id: int
    context: str = ""
    raw_content: str = ""
    related_links_text: str = ""
    embedding_dim: int = 0
    norm: float | None = None
    source_turns: int = 0
    source_commits: list[str] = []
    source_dates: list[str] = []
    inbound_count: int = 0
    outbound_count: int = 0
    cluster: int | None = None


class NoteEdit(BaseModel):
    """Fields a caller may change on a note. ``None`` leaves a field untouched."""

    context: str | None = None
    raw_content: str | None = None
    related_links: str | None = None
