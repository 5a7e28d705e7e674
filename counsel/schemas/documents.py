from pydantic import BaseModel, Field, ConfigDict


class CanvasResult(BaseModel):
    """Chat reply plus canvas document returned by the documents API"""
    chat_response: str = Field(..., alias="chatResponse")
    canvas_content: str = Field("", alias="canvasContent")
    canvas_title: str = Field("", alias="canvasTitle")

    model_config = ConfigDict(populate_by_name=True)


class DocumentSearchHit(BaseModel):
    id: str
    document_id: str = Field(..., alias="documentId")
    content: str
    score: float

    model_config = ConfigDict(populate_by_name=True)


class UploadResponse(BaseModel):
    message: str
    file_name: str = Field(..., alias="fileName")
    chunks: int = 0

    model_config = ConfigDict(populate_by_name=True)
