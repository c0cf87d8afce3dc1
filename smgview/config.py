from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Graph file loaded on startup, if it exists
    graph_path: Path = Path("data/smg.json")

    # Neighborhood view settings
    neighborhood_node_cap: int = 120
    neighborhood_long_range_cap: int = 50

    # Cluster map settings
    cluster_map_node_cap: int = 1200
    cluster_map_edges_per_note: int = 3

    # Defaults for view requests
    default_related_limit: int = 5
    default_depth: int = 1
    default_long_range_top_k: int = 200

    # Cluster matrix intensity blending
    matrix_count_weight: float = 0.35
    matrix_mean_weight: float = 0.65
    matrix_gamma: float = 0.8

    # Note list settings
    note_list_limit: int = 300

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
