"""Dispatches a view request to the extraction function for its mode."""

from typing import Callable

from smgview.domain.scene import ClusterMatrixScene, Scene
from smgview.domain.views import ViewRequest
from smgview.graph_store.base import GraphReader

from smgview.views.cluster_map import build_cluster_map
from smgview.views.cluster_matrix import build_cluster_matrix
from smgview.views.long_range import build_long_range
from smgview.views.neighborhood import build_neighborhood

BUILDERS: dict[str, Callable[..., Scene | ClusterMatrixScene]] = {
    "neighborhood": build_neighborhood,
    "cluster_map": build_cluster_map,
    "long_range": build_long_range,
    "cluster_matrix": build_cluster_matrix,
}


def build_scene(store: GraphReader, request: ViewRequest) -> Scene | ClusterMatrixScene:
    """Build the scene for a request; a pure function of the store snapshot and request."""
    return BUILDERS[request.mode](store, request)
