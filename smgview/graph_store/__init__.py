from smgview.graph_store.base import GraphIndexes, GraphReader
from smgview.graph_store.memory_store import InMemoryGraphStore, build_indexes

__all__ = ["GraphIndexes", "GraphReader", "InMemoryGraphStore", "build_indexes"]
