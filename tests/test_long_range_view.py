"""Tests for the long-range view and view request dispatch."""

import pytest
from pydantic import ValidationError

from smgview.domain.scene import ClusterMatrixScene
from smgview.domain.views import (
    ClusterMapRequest,
    LongRangeRequest,
    NeighborhoodRequest,
    parse_view_request,
)
from smgview.views import build_long_range, build_scene


def test_long_range_top_k(store):
    scene = build_long_range(store, LongRangeRequest(note_id=1, long_range_top_k=2))

    assert scene.mode == "long_range"
    assert [(e.source, e.target, e.score) for e in scene.edges] == [(1, 6, 0.95), (2, 4, 0.75)]
    assert [(n.id, n.kind) for n in scene.nodes] == [
        (1, "selected"),
        (6, "long_range"),
        (2, "long_range"),
        (4, "long_range"),
    ]
    assert scene.score_values == [0.75, 0.95]


def test_long_range_skips_links_to_missing_notes(store):
    scene = build_long_range(store, LongRangeRequest())

    assert len(scene.edges) == 3
    assert 777 not in {node.id for node in scene.nodes}


def test_long_range_threshold_drops_untouched_nodes(store):
    scene = build_long_range(store, LongRangeRequest(min_score_normalized=1.0))

    assert [(e.source, e.target) for e in scene.edges] == [(1, 6)]
    assert [node.id for node in scene.nodes] == [1, 6]
    assert scene.score_values == [0.5, 0.75, 0.95]


def test_long_range_zero_top_k(store):
    scene = build_long_range(store, LongRangeRequest(long_range_top_k=0))

    assert scene.nodes == []
    assert scene.edges == []
    assert scene.score_domain is None


def test_build_scene_dispatches_on_mode(store):
    assert build_scene(store, NeighborhoodRequest(note_id=1)).mode == "neighborhood"
    assert build_scene(store, ClusterMapRequest()).mode == "cluster_map"
    assert build_scene(store, LongRangeRequest()).mode == "long_range"

    matrix = build_scene(store, parse_view_request({"mode": "cluster_matrix"}))
    assert isinstance(matrix, ClusterMatrixScene)


def test_build_scene_is_repeatable(store):
    request = NeighborhoodRequest(note_id=1, depth=2)

    assert build_scene(store, request) == build_scene(store, request)


def test_parse_view_request_accepts_camel_case():
    request = parse_view_request(
        {
            "mode": "neighborhood",
            "noteId": 4,
            "relatedLimit": 3,
            "minScoreNormalized": 0.25,
            "includeLongRange": False,
        }
    )

    assert isinstance(request, NeighborhoodRequest)
    assert request.note_id == 4
    assert request.related_limit == 3
    assert request.min_score_normalized == 0.25
    assert not request.include_long_range


def test_parse_view_request_defaults():
    request = parse_view_request({"mode": "long_range"})

    assert isinstance(request, LongRangeRequest)
    assert request.note_id is None
    assert request.depth == 1
    assert request.long_range_top_k == 200
    assert request.include_long_range


@pytest.mark.parametrize(
    "payload",
    [
        {"mode": "heatmap"},
        {"mode": "neighborhood"},
        {"mode": "cluster_map", "depth": 4},
        {"mode": "cluster_map", "relatedLimit": 0},
        {"mode": "long_range", "minScoreNormalized": 1.5},
        {"mode": "long_range", "longRangeTopK": -1},
    ],
)
def test_parse_view_request_rejects_invalid(payload):
    with pytest.raises(ValidationError):
        parse_view_request(payload)
