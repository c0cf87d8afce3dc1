"""Tests for note listing, search and detail helpers."""

import pytest

from smgview.exceptions import NoteNotFoundError
from smgview.queries import (
    filter_notes,
    format_timestamp,
    latest_timestamp,
    note_detail,
    note_summary,
    summarize,
)
from tests.fakes import make_note


def _ids(notes) -> list:
    return [note["note_id"] for note in notes]


def test_summarize_collapses_whitespace():
    assert summarize("  a\n\n b\tc  ", 20) == "a b c"


def test_summarize_truncates_with_ellipsis():
    summary = summarize("x" * 100, 10)

    assert summary == "x" * 9 + "…"
    assert len(summary) == 10


def test_format_timestamp():
    assert format_timestamp(0) == "n/a"
    assert format_timestamp(-5) == "n/a"
    assert format_timestamp(float("nan")) == "n/a"
    assert format_timestamp(1700000000) == "2023-11-14"


def test_latest_timestamp():
    assert latest_timestamp(make_note(1, source_timestamps=[5, "x", 9, 2])) == 9
    assert latest_timestamp(make_note(1, source_timestamps=None)) == 0


def test_filter_notes_without_query_sorts_by_id(store):
    notes = list(reversed(store.notes)) + [{"note_id": "bad"}]

    assert _ids(filter_notes(notes)) == [1, 2, 3, 4, 5, 6]


def test_filter_notes_query_is_case_insensitive(store):
    store.get_note(4)["context"] = "Spectral Clustering notes"

    assert _ids(filter_notes(store.notes, query="spectral")) == [4]
    assert _ids(filter_notes(store.notes, query="  CLUSTERING ")) == [4]


def test_filter_notes_matches_commit_ids(store):
    assert _ids(filter_notes(store.notes, query="89abc")) == [1]


def test_filter_notes_matches_raw_content(store):
    assert _ids(filter_notes(store.notes, query="raw content of note 5")) == [5]


def test_filter_notes_sort_orders(store):
    assert _ids(filter_notes(store.notes, sort="id_desc")) == [6, 5, 4, 3, 2, 1]

    store.get_note(3)["source_timestamps"] = [1800000000]
    assert _ids(filter_notes(store.notes, sort="timestamp_desc"))[:2] == [3, 6]


def test_note_summary(store):
    summary = note_summary(store, store.get_note(1))

    assert summary.note_id == 1
    assert summary.snippet == "context 1"
    assert summary.related_count == 5
    assert summary.inbound_count == 2
    assert summary.cluster == 0


def test_note_detail(store):
    detail = note_detail(store, 1)

    assert detail.related_links_text == "2:0.900, 3:0.800, 4:0.700, 5:0.600, 6:0.500"
    assert detail.embedding_dim == 3
    assert detail.norm == pytest.approx(0.374)
    assert detail.source_turns == 1
    assert detail.source_commits == ["01234567"]
    assert detail.source_dates == ["2023-11-14"]
    assert detail.inbound_count == 2
    assert detail.outbound_count == 5
    assert detail.cluster == 0


def test_note_detail_skips_empty_commits(store):
    detail = note_detail(store, 2)

    assert detail.source_commits == []


def test_note_detail_unknown_note(store):
    with pytest.raises(NoteNotFoundError):
        note_detail(store, 42)
