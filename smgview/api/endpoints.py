from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.responses import Response
from loguru import logger
from pydantic import ValidationError

from smgview.config import settings
from smgview.domain.note import NoteDetail, NoteEdit, NoteSummary
from smgview.domain.reports import MutationResult, SessionStatus
from smgview.domain.views import parse_view_request
from smgview.exceptions import NoteNotFoundError, ParseError, ValidationFailed
from smgview.queries import SortOrder, filter_notes, note_detail, note_summary
from smgview.session import GraphSession
from smgview.views import build_scene


def _create_load_endpoint(session: GraphSession):
    """Create the graph upload endpoint handler."""

    async def load_graph(request: Request, file_name: str | None = None) -> SessionStatus:
        body = await request.body()
        try:
            session.open(body, file_name=file_name)
        except ParseError as err:
            logger.error(f"Failed to load graph: {err}")
            raise HTTPException(status_code=400, detail=str(err)) from err
        return session.status()

    return load_graph


def _create_export_endpoint(session: GraphSession):
    """Create the graph download endpoint handler."""

    def export_graph() -> Response:
        if not session.loaded:
            raise HTTPException(status_code=404, detail="No graph loaded")
        try:
            payload = session.export()
        except ValidationFailed as err:
            logger.warning(f"Export refused: {err}")
            raise HTTPException(status_code=409, detail=err.errors) from err

        base_name = (session.file_name or "smg.json").removesuffix(".json")
        return Response(
            content=payload,
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{base_name}-edited.json"'},
        )

    return export_graph


def _create_notes_list_endpoint(session: GraphSession):
    """Create the note list endpoint handler."""

    def list_notes(
        query: str = "",
        sort: SortOrder = "id_asc",
        limit: int = settings.note_list_limit,
    ) -> list[NoteSummary]:
        notes = filter_notes(session.store.notes, query=query, sort=sort)
        return [note_summary(session.store, note) for note in notes[: max(0, limit)]]

    return list_notes


def _create_note_endpoints(session: GraphSession):
    """Create the single-note endpoint handlers (detail, edit, delete, select)."""

    def get_note(note_id: int) -> NoteDetail:
        try:
            return note_detail(session.store, note_id)
        except NoteNotFoundError as err:
            raise HTTPException(status_code=404, detail="Note not found") from err

    def edit_note(note_id: int, edit: NoteEdit) -> MutationResult:
        try:
            return session.edit(note_id, edit)
        except NoteNotFoundError as err:
            logger.warning(f"Edit of unknown note {note_id}")
            raise HTTPException(status_code=404, detail="Note not found") from err

    def delete_note(note_id: int) -> MutationResult:
        return session.delete(note_id)

    def select_note(note_id: int) -> SessionStatus:
        try:
            session.select(note_id)
        except NoteNotFoundError as err:
            raise HTTPException(status_code=404, detail="Note not found") from err
        return session.status()

    return get_note, edit_note, delete_note, select_note


def _create_view_endpoint(session: GraphSession):
    """Create the scene building endpoint handler."""

    def build_view(payload: dict = Body(...)) -> dict:  # noqa: B008
        try:
            view_request = parse_view_request(payload)
        except ValidationError as err:
            raise HTTPException(
                status_code=422,
                detail=err.errors(include_url=False, include_context=False, include_input=False),
            ) from err

        scene = build_scene(session.store, view_request)
        return scene.model_dump(mode="json", by_alias=True)

    return build_view


def get_endpoints_router(*, session: GraphSession) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    async def health_check():
        return {"status": "healthy"}

    @router.get("/api/status")
    def status() -> SessionStatus:
        return session.status()

    get_note, edit_note, delete_note, select_note = _create_note_endpoints(session)

    router.post("/api/graph")(_create_load_endpoint(session))
    router.get("/api/graph/export")(_create_export_endpoint(session))
    router.get("/api/notes")(_create_notes_list_endpoint(session))
    router.get("/api/notes/{note_id}")(get_note)
    router.put("/api/notes/{note_id}")(edit_note)
    router.delete("/api/notes/{note_id}")(delete_note)
    router.post("/api/notes/{note_id}/select")(select_note)
    router.post("/api/views")(_create_view_endpoint(session))

    return router
