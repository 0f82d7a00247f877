from __future__ import annotations

import html
import json
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from private_notes.api import deps
from private_notes.core.errors import ServiceResponse
from private_notes.core.gate import REQUEST_TOKEN_ACTION, RequestContext
from private_notes.models.notes import EditorBootstrap, ErrorOut, NoteOut, SaveResult

NAMESPACE = "/private-student-notes/v1"
EDITOR_MOUNT_ID = "private-student-note-editor"

router = APIRouter(prefix=NAMESPACE, tags=["notes"])


def _to_json(result: ServiceResponse) -> JSONResponse:
    return JSONResponse(status_code=result.status, content=result.body)


def render_editor_mount(context_id: int) -> str:
    return f'<div id="{EDITOR_MOUNT_ID}" data-course-id="{html.escape(str(context_id))}"></div>'


def _note_from_body(raw_body: bytes) -> Any:
    # unparsable bodies become "no note" and end up as invalid_data after the gate
    try:
        body = json.loads(raw_body.decode("utf-8")) if raw_body else None
    except (UnicodeDecodeError, ValueError):
        return None
    if not isinstance(body, dict):
        return None
    return body.get("note")


@router.get(
    "/get-note",
    response_model=NoteOut,
    responses={401: {"model": ErrorOut}, 403: {"model": ErrorOut}},
)
def get_note(ctx: RequestContext = Depends(deps.get_request_context)):
    return _to_json(deps.notes_service.fetch(ctx))


@router.post(
    "/save-note",
    response_model=SaveResult,
    responses={
        400: {"model": SaveResult},
        401: {"model": ErrorOut},
        403: {"model": ErrorOut},
        500: {"model": SaveResult},
    },
)
async def save_note(request: Request, ctx: RequestContext = Depends(deps.get_request_context)):
    raw_body = await request.body()
    return _to_json(deps.notes_service.save(ctx, _note_from_body(raw_body)))


@router.get("/bootstrap", response_model=EditorBootstrap)
def bootstrap(
    resource_id: int | None = Query(default=None, ge=0),
    ctx: RequestContext = Depends(deps.get_request_context),
) -> EditorBootstrap:
    """Request token and editor mount point for the page being rendered.

    ``resource_id`` is the course or lesson the page shows; lessons map to
    their course. Anonymous callers get a token bound to the anonymous
    session and no mount point.
    """
    context_id = deps.keys.context_for_resource(resource_id)
    return EditorBootstrap(
        token=deps.request_tokens.create(REQUEST_TOKEN_ACTION, ctx.session_id),
        context_id=context_id,
        mount=render_editor_mount(context_id) if ctx.user is not None else "",
    )
