"""Render-ready scene models handed to the rendering layer."""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from smgview.domain.scores import ScoreDomain

NodeKind = Literal["selected", "outbound", "inbound", "expanded", "long_range", "sampled"]
EdgeKind = Literal["related_out", "related_in", "related", "long_range"]
ViewMode = Literal["neighborhood", "cluster_map", "long_range", "cluster_matrix"]


class SceneModel(BaseModel):
    """Base for scene payloads; serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SceneNode(SceneModel):
    id: int
    kind: NodeKind
    cluster: int | None = None


class SceneEdge(SceneModel):
    source: int
    target: int
    kind: EdgeKind
    score: float


class Scene(SceneModel):
    """A bounded node/edge set for one view.

    Attributes:
        mode: The view mode that produced the scene
        nodes: Nodes to draw, selected note first when present
        edges: Edges that cleared the score threshold and touch only kept nodes
        score_values: Every score observed while building, sorted ascending,
            including edges that were later filtered out
        score_domain: Min/max of ``score_values`` or None when nothing was observed
        threshold_raw: Raw score cutoff derived from the normalized threshold
    """

    mode: ViewMode
    nodes: list[SceneNode] = []
    edges: list[SceneEdge] = []
    score_values: list[float] = []
    score_domain: ScoreDomain | None = None
    threshold_raw: float = 0.0


class ClusterCell(SceneModel):
    """Aggregate of all edges between two clusters (unordered, ``cluster_a <= cluster_b``)."""

    cluster_a: int
    cluster_b: int
    count: int
    sum: float
    max_score: float
    mean_score: float
    intensity: float = 0.0
    hidden: bool = False


class ClusterMatrixScene(SceneModel):
    mode: Literal["cluster_matrix"] = "cluster_matrix"
    clusters: list[int] = []
    cells: list[ClusterCell] = []
    score_values: list[float] = []
    score_domain: ScoreDomain | None = None
    threshold_raw: float = 0.0
