"""Diagnostics and mutation outcome models."""

from pydantic import BaseModel


class ValidationReport(BaseModel):
    """Errors block saving; warnings never do."""

    errors: list[str] = []
    warnings: list[str] = []

    @property
    def ok(self) -> bool:
        return not self.errors


class MutationResult(BaseModel):
    """Outcome of an edit or a delete."""

    note_id: int
    changed: bool
    warnings: list[str] = []
    selected_note_id: int | None = None


class SessionStatus(BaseModel):
    """What the status bar shows."""

    file_name: str | None = None
    note_count: int = 0
    dirty: bool = False
    summary: str
    errors: list[str] = []
    warnings: list[str] = []
    selected_note_id: int | None = None
