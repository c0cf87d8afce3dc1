from tests.fakes.graph_documents import make_graph, make_note, sample_graph_document

__all__ = ["make_graph", "make_note", "sample_graph_document"]
