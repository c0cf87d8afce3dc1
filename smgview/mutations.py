"""Edits and deletions that keep the graph and its indexes consistent."""

import math
import re

from loguru import logger

from smgview.domain.note import is_note_id, is_related_link, iter_related_links
from smgview.domain.reports import MutationResult
from smgview.exceptions import NoteNotFoundError
from smgview.graph_store.memory_store import InMemoryGraphStore

TOKEN_SEPARATOR = re.compile(r"[\s,]+")


def parse_related_links(text: str) -> list[tuple[int, float]]:
    """Parse editor text into ``(target_id, score)`` pairs.

    Tokens look like ``id:score`` and are separated by commas, whitespace or
    newlines. A bare ``id`` means score 0. Tokens that do not parse are dropped.

    Args:
        text: Raw text from the editor

    Returns:
        Parsed pairs in input order, duplicates included
    """
    links = []
    for token in TOKEN_SEPARATOR.split(text):
        if not token:
            continue
        id_part, _, score_part = token.partition(":")
        try:
            target_id = int(id_part)
            score = float(score_part) if score_part else 0.0
        except ValueError:
            continue
        if not math.isfinite(score):
            continue
        links.append((target_id, score))
    return links


def format_related_links(note: dict) -> str:
    """Render a note's related links in the editor text format."""
    return ", ".join(f"{target_id}:{score:.3f}" for target_id, score in iter_related_links(note))


class MutationEngine:
    """Applies edits and deletions to a graph store, rebuilding indexes after each."""

    def __init__(self, store: InMemoryGraphStore):
        self.store = store

    def edit_note(
        self,
        note_id: int,
        *,
        context: str | None = None,
        raw_content: str | None = None,
        related_links_text: str | None = None,
    ) -> MutationResult:
        """Update a note's text fields and, optionally, its related links.

        Related links are deduplicated by target (highest score wins) and links
        to unknown notes are dropped with a single warning naming all of them.

        Raises:
            NoteNotFoundError: The note id is not in the graph
        """
        note = self.store.get_note(note_id)
        if note is None:
            raise NoteNotFoundError(note_id)

        warnings = []
        if context is not None:
            note["context"] = context
        if raw_content is not None:
            note["raw_content"] = raw_content

        if related_links_text is not None:
            deduped: dict[int, float] = {}
            for target_id, score in parse_related_links(related_links_text):
                deduped[target_id] = max(score, deduped.get(target_id, score))

            kept = []
            dropped = []
            for target_id, score in deduped.items():
                if self.store.has_note(target_id):
                    kept.append([target_id, score])
                else:
                    dropped.append(target_id)
            note["related_note_links"] = kept

            if dropped:
                warning = (
                    f"Dropped missing related links for {note_id}: "
                    f"{', '.join(str(target_id) for target_id in dropped)}"
                )
                logger.warning(warning)
                warnings.append(warning)

        self.store.build_indexes()
        logger.info(f"Edited note {note_id}")
        return MutationResult(
            note_id=note_id, changed=True, warnings=warnings, selected_note_id=note_id
        )

    def delete_note(self, note_id: int) -> MutationResult:
        """Remove a note and every reference to it.

        Removal is positional so ``cluster_labels`` stays aligned with ``notes``.
        Unknown ids are a no-op. Surviving note ids are never renumbered.
        """
        position = self.store.note_position(note_id) if self.store.has_note(note_id) else None
        if position is None:
            return MutationResult(note_id=note_id, changed=False)

        graph = self.store.graph
        notes = graph["notes"]
        notes.pop(position)

        labels = graph.get("cluster_labels")
        if isinstance(labels, list) and position < len(labels):
            labels.pop(position)

        for note in notes:
            if not isinstance(note, dict):
                continue
            related = note.get("related_note_links")
            if not isinstance(related, list):
                note["related_note_links"] = []
                continue
            note["related_note_links"] = [
                entry for entry in related if is_related_link(entry) and entry[0] != note_id
            ]

        long_links = graph.get("long_range_links")
        if isinstance(long_links, list):
            graph["long_range_links"] = [
                entry
                for entry in long_links
                if isinstance(entry, list)
                and len(entry) == 3
                and entry[0] != note_id
                and entry[1] != note_id
            ]

        self.store.build_indexes()

        selected = None
        if notes:
            candidate = notes[min(position, len(notes) - 1)]
            if isinstance(candidate, dict) and is_note_id(candidate.get("note_id")):
                selected = candidate["note_id"]
        logger.info(f"Deleted note {note_id} at position {position}, {len(notes)} notes left")
        return MutationResult(note_id=note_id, changed=True, selected_note_id=selected)
