"""Read-side helpers for listing, searching and describing notes."""

import re
from datetime import datetime, timezone
from typing import Literal

from smgview.domain.note import NoteDetail, NoteSummary, is_note_id, is_score
from smgview.exceptions import NoteNotFoundError
from smgview.graph_store.base import GraphReader
from smgview.mutations import format_related_links

SortOrder = Literal["id_asc", "id_desc", "timestamp_desc"]


def summarize(text: str, max_len: int) -> str:
    """Collapse whitespace and truncate with an ellipsis."""
    compact = re.sub(r"\s+", " ", str(text or "")).strip()
    if len(compact) <= max_len:
        return compact
    return f"{compact[: max_len - 1]}…"


def format_timestamp(epoch_seconds: float) -> str:
    """ISO date of a unix timestamp, or "n/a" for missing/invalid values."""
    if not is_score(epoch_seconds) or epoch_seconds <= 0:
        return "n/a"
    try:
        return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).date().isoformat()
    except (OverflowError, OSError, ValueError):
        return "n/a"


def latest_timestamp(note: dict) -> float:
    timestamps = note.get("source_timestamps")
    if not isinstance(timestamps, list):
        return 0
    return max([0, *(ts for ts in timestamps if is_score(ts))])


def _list_field(note: dict, key: str) -> list:
    value = note.get(key)
    return value if isinstance(value, list) else []


def _matches(note: dict, query: str) -> bool:
    commits = " ".join(str(c) for c in _list_field(note, "source_commit_ids") if c)
    haystacks = [
        str(note.get("note_id", "")),
        str(note.get("context") or ""),
        str(note.get("raw_content") or ""),
        commits,
    ]
    return any(query in haystack.lower() for haystack in haystacks)


def filter_notes(notes: list, query: str = "", sort: SortOrder = "id_asc") -> list[dict]:
    """Search and sort notes.

    Args:
        notes: Notes in document order
        query: Case-insensitive substring matched against id, context, raw
            content and commit ids; empty matches everything
        sort: ``id_asc``, ``id_desc`` or ``timestamp_desc`` (newest source timestamp)

    Returns:
        Matching notes (only those with an integer id) in the requested order
    """
    query = query.strip().lower()
    filtered = [
        note
        for note in notes
        if isinstance(note, dict)
        and is_note_id(note.get("note_id"))
        and (not query or _matches(note, query))
    ]

    if sort == "id_desc":
        filtered.sort(key=lambda note: note["note_id"], reverse=True)
    elif sort == "timestamp_desc":
        filtered.sort(key=latest_timestamp, reverse=True)
    else:
        filtered.sort(key=lambda note: note["note_id"])
    return filtered


def note_summary(store: GraphReader, note: dict) -> NoteSummary:
    note_id = note["note_id"]
    indexes = store.indexes
    return NoteSummary(
        note_id=note_id,
        snippet=summarize(note.get("context") or note.get("raw_content") or "", 90),
        related_count=len(_list_field(note, "related_note_links")),
        inbound_count=len(indexes.reverse_related.get(note_id, {})),
        cluster=indexes.cluster_of.get(note_id),
    )


def note_detail(store: GraphReader, note_id: int) -> NoteDetail:
    """Describe one note for the editor.

    Raises:
        NoteNotFoundError: The note id is not in the graph
    """
    note = store.get_note(note_id)
    if note is None:
        raise NoteNotFoundError(note_id)

    indexes = store.indexes
    commits = [
        commit.strip()[:8]
        for commit in _list_field(note, "source_commit_ids")
        if isinstance(commit, str) and commit.strip()
    ]
    dates = [
        format_timestamp(ts) for ts in _list_field(note, "source_timestamps") if is_score(ts)
    ]
    norm = note.get("norm")
    return NoteDetail(
        note_id=note_id,
        context=str(note.get("context") or ""),
        raw_content=str(note.get("raw_content") or ""),
        related_links_text=format_related_links(note),
        embedding_dim=len(_list_field(note, "embedding")),
        norm=float(norm) if is_score(norm) else None,
        source_turns=len(_list_field(note, "source_turn_ids")),
        source_commits=commits,
        source_dates=dates,
        inbound_count=len(indexes.reverse_related.get(note_id, {})),
        outbound_count=len(_list_field(note, "related_note_links")),
        cluster=indexes.cluster_of.get(note_id),
    )
