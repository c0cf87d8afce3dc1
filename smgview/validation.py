"""Schema and referential-integrity checks for graph documents."""

from typing import Any

from smgview.domain.note import is_note_id, is_related_link, is_score
from smgview.domain.reports import ValidationReport

TOP_LEVEL_KEYS = [
    "metadata",
    "notes",
    "cluster_labels",
    "cluster_centroids",
    "cluster_centroid_norms",
    "long_range_links",
]


def validate(graph: Any) -> ValidationReport:
    """Check a graph document without modifying it.

    Notes are checked first, then top-level keys, then dangling related links,
    so the output order is stable for a given document.

    Args:
        graph: A parsed graph document (any JSON value)

    Returns:
        ValidationReport with blocking errors and non-blocking warnings
    """
    report = ValidationReport()

    if not isinstance(graph, dict):
        report.errors.append("Root JSON must be an object.")
        return report

    notes = graph.get("notes")
    if not isinstance(notes, list):
        report.errors.append("`notes` must be an array.")
        return report

    ids: set[int] = set()
    for note in notes:
        note_id = note.get("note_id") if isinstance(note, dict) else None
        if not is_note_id(note_id):
            report.errors.append("Each note must include an integer `note_id`.")
            continue
        if note_id in ids:
            report.errors.append(f"Duplicate note_id: {note_id}")
        ids.add(note_id)

        if "related_note_links" not in note:
            report.errors.append(f"note {note_id} is missing `related_note_links` array.")
            continue
        related = note["related_note_links"]
        if not isinstance(related, list):
            report.errors.append(f"note {note_id} has a non-array `related_note_links`.")
            continue
        if not all(is_related_link(entry) for entry in related):
            report.errors.append(
                f"note {note_id} has invalid related_note_links entries; expected [int, number]."
            )

    for key in TOP_LEVEL_KEYS:
        if key not in graph:
            report.warnings.append(f"Missing top-level key: {key}")

    labels = graph.get("cluster_labels")
    if labels is not None:
        if not isinstance(labels, list):
            report.warnings.append("`cluster_labels` should be an array.")
        elif len(labels) != len(notes):
            report.warnings.append("`cluster_labels` length does not match `notes` length.")

    long_links = graph.get("long_range_links")
    if long_links is not None:
        if not isinstance(long_links, list):
            report.warnings.append("`long_range_links` should be an array.")
        elif not all(_is_long_range_link(entry) for entry in long_links):
            report.warnings.append(
                "Some `long_range_links` entries are not [int, int, number]."
            )

    report.warnings.extend(dangling_reference_warnings(notes, ids))
    return report


def dangling_reference_warnings(notes: list, known_ids: set[int]) -> list[str]:
    """Warnings for related links whose target is not a known note id."""
    warnings = []
    for note in notes:
        if not isinstance(note, dict) or not is_note_id(note.get("note_id")):
            continue
        related = note.get("related_note_links")
        for entry in related if isinstance(related, list) else []:
            if is_related_link(entry) and entry[0] not in known_ids:
                warnings.append(
                    f"note {note['note_id']} references missing related note {entry[0]}"
                )
    return warnings


def _is_long_range_link(entry: Any) -> bool:
    return (
        isinstance(entry, list)
        and len(entry) == 3
        and is_note_id(entry[0])
        and is_note_id(entry[1])
        and is_score(entry[2])
    )
