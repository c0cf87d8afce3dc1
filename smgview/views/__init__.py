"""View construction: bounded scenes extracted from the full graph."""

from smgview.views.builder import build_scene
from smgview.views.cluster_map import build_cluster_map
from smgview.views.cluster_matrix import build_cluster_matrix
from smgview.views.long_range import build_long_range
from smgview.views.neighborhood import build_neighborhood

__all__ = [
    "build_cluster_map",
    "build_cluster_matrix",
    "build_long_range",
    "build_neighborhood",
    "build_scene",
]
