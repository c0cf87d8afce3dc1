"""Cluster map view: a bounded, cluster-balanced sample of the whole graph."""

import math

from loguru import logger

from smgview.config import settings
from smgview.domain.note import iter_related_links
from smgview.domain.scene import Scene, SceneEdge, SceneNode
from smgview.domain.views import ClusterMapRequest
from smgview.graph_store.base import GraphIndexes, GraphReader
from smgview.scoring.normalizer import score_threshold


def sample_notes(indexes: GraphIndexes, selected_id: int | None, cap: int) -> list[int]:
    """Pick up to ``cap`` note ids, spread across clusters.

    The selected note comes first, then each cluster (ascending id) contributes
    up to ``ceil(cap / cluster_count)`` of its lowest ids, then the lowest ids
    overall fill whatever budget is left.
    """
    sample: dict[int, None] = {}
    if selected_id in indexes.by_id and cap > 0:
        sample[selected_id] = None

    members: dict[int, list[int]] = {cluster_id: [] for cluster_id in indexes.cluster_counts}
    for note_id in sorted(indexes.cluster_of):
        members[indexes.cluster_of[note_id]].append(note_id)

    if members:
        per_cluster = math.ceil(cap / len(members))
        for cluster_id in sorted(members):
            for note_id in members[cluster_id][:per_cluster]:
                if len(sample) >= cap:
                    break
                sample.setdefault(note_id, None)

    for note_id in sorted(indexes.by_id):
        if len(sample) >= cap:
            break
        sample.setdefault(note_id, None)

    return list(sample)


def build_cluster_map(store: GraphReader, request: ClusterMapRequest) -> Scene:
    """Build the global cluster overview scene.

    Each sampled note offers its few strongest outbound links as candidate
    edges; candidates need both endpoints in the sample. The threshold is
    derived from the scores of those candidates. Edges are deduplicated per
    unordered pair and category, keeping the higher score.

    Args:
        store: Graph to read from
        request: Cluster map parameters

    Returns:
        Scene with at most ``settings.cluster_map_node_cap`` nodes
    """
    indexes = store.indexes
    sample = sample_notes(indexes, request.note_id, settings.cluster_map_node_cap)
    in_sample = set(sample)

    candidates: dict[tuple[int, int, str], SceneEdge] = {}

    def push_candidate(source: int, target: int, kind: str, score: float) -> None:
        key = (min(source, target), max(source, target), kind)
        current = candidates.get(key)
        if current is None or score > current.score:
            candidates[key] = SceneEdge(source=source, target=target, kind=kind, score=score)

    for note_id in sample:
        strongest = sorted(
            iter_related_links(indexes.by_id[note_id]), key=lambda link: (-link[1], link[0])
        )[: settings.cluster_map_edges_per_note]
        for target_id, score in strongest:
            if target_id in in_sample:
                push_candidate(note_id, target_id, "related", score)

    if request.include_long_range:
        for a, b, score in store.top_long_range_links(request.long_range_top_k):
            if a in in_sample and b in in_sample:
                push_candidate(a, b, "long_range", score)

    all_edges = list(candidates.values())
    score_values = sorted(edge.score for edge in all_edges)
    domain, threshold = score_threshold(score_values, request.min_score_normalized)

    nodes = [
        SceneNode(
            id=note_id,
            kind="selected" if note_id == request.note_id else "sampled",
            cluster=indexes.cluster_of.get(note_id),
        )
        for note_id in sample
    ]
    edges = [edge for edge in all_edges if edge.score >= threshold]

    logger.debug(
        f"Cluster map: {len(nodes)} sampled notes across {len(indexes.cluster_counts)} clusters, "
        f"{len(edges)}/{len(all_edges)} edges at threshold {threshold:.4f}"
    )
    return Scene(
        mode="cluster_map",
        nodes=nodes,
        edges=edges,
        score_values=score_values,
        score_domain=domain,
        threshold_raw=threshold,
    )
