from dataclasses import dataclass, field
from typing import List, Protocol


@dataclass(frozen=True)
class GraphIndexes:
    """Derived lookup structures for one graph snapshot.

    Attributes:
        by_id: note_id -> note dict (the same object held in the graph's notes list)
        reverse_related: note_id -> {source_id: score} for inbound related links
        long_range_adj: note_id -> [(other_id, score)] for long-range links
        cluster_of: note_id -> cluster label
        cluster_counts: cluster label -> number of notes
        long_range_ranked: valid long-range triples, highest score first
    """

    by_id: dict[int, dict] = field(default_factory=dict)
    reverse_related: dict[int, dict[int, float]] = field(default_factory=dict)
    long_range_adj: dict[int, list[tuple[int, float]]] = field(default_factory=dict)
    cluster_of: dict[int, int] = field(default_factory=dict)
    cluster_counts: dict[int, int] = field(default_factory=dict)
    long_range_ranked: list[tuple[int, int, float]] = field(default_factory=list)


class GraphReader(Protocol):
    @property
    def graph(self) -> dict | None:
        """The loaded graph document, or None before the first load."""
        ...

    @property
    def notes(self) -> List[dict]:
        """Notes in document order."""
        ...

    @property
    def indexes(self) -> GraphIndexes:
        """The current index snapshot."""
        ...

    def get_note(self, note_id: int) -> dict | None:
        """Get a note by its ID."""
        ...

    def has_note(self, note_id: int) -> bool:
        """Check whether a note ID is indexed."""
        ...

    def note_position(self, note_id: int) -> int | None:
        """Array position of the first note with this ID."""
        ...

    def top_long_range_links(self, top_k: int) -> List[tuple[int, int, float]]:
        """The ``top_k`` highest scoring long-range links."""
        ...
