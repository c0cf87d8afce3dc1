"""Editing session: the application state wrapped around one graph store."""

from pathlib import Path

from loguru import logger

from smgview.domain.note import NoteEdit, is_note_id
from smgview.domain.reports import MutationResult, SessionStatus, ValidationReport
from smgview.exceptions import NoteNotFoundError, ValidationFailed
from smgview.graph_store.memory_store import InMemoryGraphStore
from smgview.mutations import MutationEngine
from smgview.validation import validate


class GraphSession:
    """Tracks file name, current selection, dirty flag and diagnostics for a store.

    The store, validator and view builders stay free of this state; callers
    pass the session (or its store) explicitly.
    """

    def __init__(self, store: InMemoryGraphStore | None = None) -> None:
        self.store = store or InMemoryGraphStore()
        self.mutations = MutationEngine(self.store)
        self.file_name: str | None = None
        self.selected_note_id: int | None = None
        self.dirty = False
        self.report = ValidationReport()
        if self.store.graph is not None:
            self._reset_after_load()

    @property
    def loaded(self) -> bool:
        return self.store.graph is not None

    def open(self, document: dict | str | bytes, file_name: str | None = None) -> ValidationReport:
        """Load a document and validate it.

        Validation never blocks loading. On ParseError the session is unchanged.
        """
        self.store.load(document)
        self.file_name = file_name
        return self._reset_after_load()

    def open_file(self, filepath: str | Path) -> ValidationReport:
        self.store.load_file(filepath)
        self.file_name = Path(filepath).name
        return self._reset_after_load()

    def _reset_after_load(self) -> ValidationReport:
        self.dirty = False
        self.report = validate(self.store.graph)
        self.selected_note_id = next(
            (
                note["note_id"]
                for note in self.store.notes[:1]
                if isinstance(note, dict) and is_note_id(note.get("note_id"))
            ),
            None,
        )
        if self.report.errors:
            logger.warning(f"Loaded graph has {len(self.report.errors)} validation error(s)")
        return self.report

    def select(self, note_id: int) -> None:
        if not self.store.has_note(note_id):
            raise NoteNotFoundError(note_id)
        self.selected_note_id = note_id

    def edit(self, note_id: int, edit: NoteEdit) -> MutationResult:
        result = self.mutations.edit_note(
            note_id,
            context=edit.context,
            raw_content=edit.raw_content,
            related_links_text=edit.related_links,
        )
        self.report.warnings.extend(result.warnings)
        self.dirty = True
        return result

    def delete(self, note_id: int) -> MutationResult:
        result = self.mutations.delete_note(note_id)
        if result.changed:
            self.dirty = True
            if self.selected_note_id == note_id or self.selected_note_id is None:
                self.selected_note_id = result.selected_note_id
        return result

    def export(self) -> str:
        """Re-validate and serialize the graph for download.

        Raises:
            ValidationFailed: Validation reports errors; nothing is serialized.
        """
        self.report = validate(self.store.graph)
        if self.report.errors:
            raise ValidationFailed(self.report.errors)
        payload = self.store.dump()
        self.dirty = False
        return payload

    def save(self, filepath: str | Path | None = None) -> None:
        self.report = validate(self.store.graph)
        if self.report.errors:
            raise ValidationFailed(self.report.errors)
        self.store.save(filepath)
        self.dirty = False

    def summary(self) -> str:
        if not self.loaded:
            return "No file loaded"
        errors, warnings = len(self.report.errors), len(self.report.warnings)
        if errors:
            return f"{errors} error(s), {warnings} warning(s)"
        if warnings:
            return f"Valid with {warnings} warning(s)"
        return "Valid"

    def status(self) -> SessionStatus:
        return SessionStatus(
            file_name=self.file_name,
            note_count=len(self.store.notes),
            dirty=self.dirty,
            summary=self.summary(),
            errors=list(self.report.errors),
            warnings=list(self.report.warnings),
            selected_note_id=self.selected_note_id,
        )
