import json
from collections import Counter
from pathlib import Path
from typing import List

from loguru import logger

from smgview.domain.note import is_note_id, is_score, iter_related_links
from smgview.exceptions import ParseError, ValidationFailed
from smgview.graph_store.base import GraphIndexes, GraphReader
from smgview.validation import validate


def build_indexes(graph: dict | None) -> GraphIndexes:
    """Derive every index structure from a graph document in O(notes + edges).

    Notes without an integer ``note_id`` are ignored, and for duplicated ids the
    first note in array order wins. Related links pointing at unknown notes are
    left out of ``reverse_related``; long-range triples touching unknown notes
    are skipped.
    """
    if not graph or not isinstance(graph.get("notes"), list):
        return GraphIndexes()

    notes = graph["notes"]
    by_id: dict[int, dict] = {}
    for note in notes:
        if isinstance(note, dict) and is_note_id(note.get("note_id")):
            by_id.setdefault(note["note_id"], note)

    reverse_related: dict[int, dict[int, float]] = {note_id: {} for note_id in by_id}
    dangling = 0
    for src_id, note in by_id.items():
        for dst_id, score in iter_related_links(note):
            inbound = reverse_related.get(dst_id)
            if inbound is None:
                dangling += 1
                continue
            inbound[src_id] = max(score, inbound.get(src_id, score))

    long_range_adj: dict[int, list[tuple[int, float]]] = {note_id: [] for note_id in by_id}
    long_range_ranked = []
    long_links = graph.get("long_range_links")
    for entry in long_links if isinstance(long_links, list) else []:
        if not isinstance(entry, list) or len(entry) != 3:
            continue
        a, b, score = entry
        if not (is_note_id(a) and is_note_id(b) and is_score(score)):
            continue
        if a not in by_id or b not in by_id:
            continue
        score = float(score)
        long_range_adj[a].append((b, score))
        if a != b:
            long_range_adj[b].append((a, score))
        long_range_ranked.append((a, b, score))
    long_range_ranked.sort(key=lambda link: (-link[2], link[0], link[1]))

    cluster_of: dict[int, int] = {}
    labels = graph.get("cluster_labels")
    if isinstance(labels, list):
        for position, note in enumerate(notes[: len(labels)]):
            if not isinstance(note, dict) or not is_note_id(note.get("note_id")):
                continue
            if is_note_id(labels[position]):
                cluster_of.setdefault(note["note_id"], labels[position])
    cluster_counts = dict(sorted(Counter(cluster_of.values()).items()))

    if dangling:
        logger.debug(f"Skipped {dangling} related links to missing notes while indexing")

    return GraphIndexes(
        by_id=by_id,
        reverse_related=reverse_related,
        long_range_adj=long_range_adj,
        cluster_of=cluster_of,
        cluster_counts=cluster_counts,
        long_range_ranked=long_range_ranked,
    )


class InMemoryGraphStore(GraphReader):
    """Owns the loaded graph document and its derived indexes."""

    def __init__(self, filepath: str | Path | None = None) -> None:
        """Initialize InMemoryGraphStore.

        Args:
            filepath: Path to a graph JSON file. If provided and exists, will auto-load.
                     If provided and doesn't exist, will save to this path when save() is called.
                     If not provided, starts empty with nothing loaded.
        """
        self._filepath = str(filepath) if filepath else None
        self._graph: dict | None = None
        self._indexes = GraphIndexes()

        if self._filepath and Path(self._filepath).exists():
            self.load_file(self._filepath)

    @classmethod
    def from_document(cls, document: dict | str | bytes) -> "InMemoryGraphStore":
        """Create a store from an in-memory document (useful for testing)."""
        instance = cls(filepath=None)
        instance.load(document)
        return instance

    @property
    def graph(self) -> dict | None:
        return self._graph

    @property
    def notes(self) -> List[dict]:
        if self._graph is None:
            return []
        return self._graph["notes"]

    @property
    def indexes(self) -> GraphIndexes:
        return self._indexes

    def load(self, document: dict | str | bytes) -> dict:
        """Parse a document and make it the current graph.

        Args:
            document: JSON text or an already parsed object

        Returns:
            The loaded graph document

        Raises:
            ParseError: The text is not decodable JSON, the root is not an object or
                ``notes`` is not a list. The current graph is kept.
        """
        if isinstance(document, (str, bytes)):
            try:
                document = json.loads(document)
            except json.JSONDecodeError as err:
                raise ParseError(f"Invalid JSON syntax: {err}") from err
            except UnicodeDecodeError as err:
                raise ParseError(f"Invalid text encoding: {err}") from err

        if not isinstance(document, dict):
            raise ParseError("Root JSON must be an object.")
        if not isinstance(document.get("notes"), list):
            raise ParseError("`notes` must be an array.")

        indexes = build_indexes(document)
        self._graph, self._indexes = document, indexes
        logger.info(
            f"Loaded graph with {len(document['notes'])} notes, "
            f"{len(indexes.cluster_counts)} clusters, "
            f"{len(indexes.long_range_ranked)} long-range links"
        )
        return document

    def load_file(self, filepath: str | Path) -> dict:
        """Load a graph document from a JSON file."""
        with open(filepath, "rb") as f:
            raw = f.read()
        graph = self.load(raw)
        self._filepath = str(filepath)
        return graph

    def build_indexes(self) -> GraphIndexes:
        """Rebuild all indexes from the current graph and swap them in."""
        self._indexes = build_indexes(self._graph)
        return self._indexes

    def get_note(self, note_id: int) -> dict | None:
        """Get a note by its ID."""
        return self._indexes.by_id.get(note_id)

    def has_note(self, note_id: int) -> bool:
        return note_id in self._indexes.by_id

    def note_position(self, note_id: int) -> int | None:
        for position, note in enumerate(self.notes):
            if not isinstance(note, dict) or not is_note_id(note.get("note_id")):
                continue
            if note["note_id"] == note_id:
                return position
        return None

    def top_long_range_links(self, top_k: int) -> List[tuple[int, int, float]]:
        return self._indexes.long_range_ranked[: max(0, top_k)]

    def dump(self) -> str:
        """Serialize the graph as pretty-printed JSON.

        Raises:
            ValidationFailed: The graph has validation errors; nothing is produced.
        """
        report = validate(self._graph)
        if report.errors:
            logger.warning(f"Refusing to serialize graph: {len(report.errors)} validation error(s)")
            raise ValidationFailed(report.errors)
        return json.dumps(self._graph, indent=2)

    def save(self, filepath: str | Path | None = None) -> None:
        """Save the graph to a JSON file.

        Args:
            filepath: Path to save to. If not provided, uses the filepath from initialization.
        """
        save_path = filepath or self._filepath
        if not save_path:
            raise ValueError(
                "No filepath provided and no default filepath set during initialization"
            )

        payload = self.dump()
        with open(save_path, "w", encoding="utf-8") as f:
            f.write(payload)
        logger.info(f"Saved graph with {len(self.notes)} notes to {save_path}")
