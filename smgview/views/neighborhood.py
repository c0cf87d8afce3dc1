"""Neighborhood view: bounded breadth-first expansion around one note."""

from collections import deque

from loguru import logger

from smgview.config import settings
from smgview.domain.note import iter_related_links
from smgview.domain.scene import NodeKind, Scene, SceneEdge, SceneNode
from smgview.domain.views import NeighborhoodRequest
from smgview.graph_store.base import GraphReader
from smgview.scoring.normalizer import score_threshold

# Higher rank wins when a note is reached in more than one role.
ROLE_RANK: dict[str, int] = {
    "selected": 4,
    "outbound": 3,
    "inbound": 3,
    "expanded": 2,
    "long_range": 1,
}


def _by_score_then_id(link: tuple[int, float]) -> tuple[float, int]:
    return -link[1], link[0]


def build_neighborhood(store: GraphReader, request: NeighborhoodRequest) -> Scene:
    """Build the neighborhood scene of the requested note.

    Each visited note spends one ``related_limit`` budget on links: its
    strongest outbound links first, then inbound links with whatever is left.
    Notes first reached at depth 0 keep the outbound/inbound role, deeper ones
    are "expanded". Long-range links of the selected note are appended
    independently of depth.

    Args:
        store: Graph to read from
        request: Neighborhood parameters

    Returns:
        Scene with at most ``settings.neighborhood_node_cap`` nodes; empty if
        the note is unknown
    """
    indexes = store.indexes
    selected_id = request.note_id
    if selected_id not in indexes.by_id:
        return Scene(mode="neighborhood")

    kinds: dict[int, NodeKind] = {selected_id: "selected"}
    edges: dict[tuple[int, int, str], SceneEdge] = {}

    def push_node(note_id: int, kind: NodeKind) -> None:
        current = kinds.get(note_id)
        if current is None or ROLE_RANK[kind] > ROLE_RANK[current]:
            kinds[note_id] = kind

    def push_edge(source: int, target: int, kind: str, score: float) -> None:
        key = (source, target, kind)
        if key not in edges:
            edges[key] = SceneEdge(source=source, target=target, kind=kind, score=score)

    visited_depth = {selected_id: 0}
    queue = deque([(selected_id, 0)])

    def enqueue(note_id: int, depth: int) -> None:
        if depth < visited_depth.get(note_id, depth + 1):
            visited_depth[note_id] = depth
            queue.append((note_id, depth))

    while queue:
        current_id, depth = queue.popleft()
        if depth >= request.depth:
            continue
        note = indexes.by_id[current_id]

        # Stable sort: outbound ties keep stored order.
        outbound = sorted(
            (link for link in iter_related_links(note) if link[0] in indexes.by_id),
            key=lambda link: -link[1],
        )[: request.related_limit]
        inbound = sorted(
            indexes.reverse_related.get(current_id, {}).items(),
            key=_by_score_then_id,
        )[: request.related_limit - len(outbound)]

        for target_id, score in outbound:
            push_node(target_id, "outbound" if depth == 0 else "expanded")
            push_edge(current_id, target_id, "related_out", score)
            enqueue(target_id, depth + 1)

        for source_id, score in inbound:
            push_node(source_id, "inbound" if depth == 0 else "expanded")
            push_edge(source_id, current_id, "related_in", score)
            enqueue(source_id, depth + 1)

    if request.include_long_range:
        cap = min(
            request.related_limit,
            settings.neighborhood_long_range_cap,
            request.long_range_top_k,
        )
        long_range = sorted(indexes.long_range_adj.get(selected_id, []), key=_by_score_then_id)
        for other_id, score in long_range[:cap]:
            push_node(other_id, "long_range")
            push_edge(selected_id, other_id, "long_range", score)

    all_edges = list(edges.values())
    score_values = sorted(edge.score for edge in all_edges)
    domain, threshold = score_threshold(score_values, request.min_score_normalized)

    kept_ids = list(kinds)[: settings.neighborhood_node_cap]
    allowed = set(kept_ids)
    nodes = [
        SceneNode(id=note_id, kind=kinds[note_id], cluster=indexes.cluster_of.get(note_id))
        for note_id in kept_ids
    ]
    scene_edges = [
        edge
        for edge in all_edges
        if edge.score >= threshold and edge.source in allowed and edge.target in allowed
    ]

    logger.debug(
        f"Neighborhood of {selected_id}: {len(nodes)}/{len(kinds)} nodes, "
        f"{len(scene_edges)}/{len(all_edges)} edges at threshold {threshold:.4f}"
    )
    return Scene(
        mode="neighborhood",
        nodes=nodes,
        edges=scene_edges,
        score_values=score_values,
        score_domain=domain,
        threshold_raw=threshold,
    )
