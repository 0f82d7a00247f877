from pydantic import BaseModel, Field


class NoteOut(BaseModel):
    note: str


class SaveResult(BaseModel):
    success: bool
    message: str
    code: str | None = None


class ErrorData(BaseModel):
    status: int


class ErrorOut(BaseModel):
    code: str
    message: str
    data: ErrorData


class EditorBootstrap(BaseModel):
    """What the editor front-end needs at page render time."""

    token: str
    context_id: int = Field(ge=0)
    mount: str
