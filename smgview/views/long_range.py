"""Long-range view: the strongest global long-range links and the notes they touch."""

from loguru import logger

from smgview.domain.scene import Scene, SceneEdge, SceneNode
from smgview.domain.views import LongRangeRequest
from smgview.graph_store.base import GraphReader
from smgview.scoring.normalizer import score_threshold


def build_long_range(store: GraphReader, request: LongRangeRequest) -> Scene:
    """Build a scene from the top-K long-range links that clear the threshold.

    Nodes are exactly the notes touched by surviving edges, in edge order.
    """
    indexes = store.indexes
    links = store.top_long_range_links(request.long_range_top_k)
    score_values = sorted(score for _, _, score in links)
    domain, threshold = score_threshold(score_values, request.min_score_normalized)

    edges = [
        SceneEdge(source=a, target=b, kind="long_range", score=score)
        for a, b, score in links
        if score >= threshold
    ]

    touched: dict[int, None] = {}
    for edge in edges:
        touched.setdefault(edge.source, None)
        touched.setdefault(edge.target, None)
    nodes = [
        SceneNode(
            id=note_id,
            kind="selected" if note_id == request.note_id else "long_range",
            cluster=indexes.cluster_of.get(note_id),
        )
        for note_id in touched
    ]

    logger.debug(f"Long-range view: {len(edges)}/{len(links)} links, {len(nodes)} notes")
    return Scene(
        mode="long_range",
        nodes=nodes,
        edges=edges,
        score_values=score_values,
        score_domain=domain,
        threshold_raw=threshold,
    )
