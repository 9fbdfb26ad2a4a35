"""Pydantic models for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field


class QuestionRequest(BaseModel):
    """Request model for a chat question."""

    question: str = Field(
        ...,
        description="Question to answer from the user's uploaded documents",
        json_schema_extra={"example": "What are the key stages of mitosis?"},
    )


class ChatMessageModel(BaseModel):
    """A single message in a saved conversation."""

    role: str = Field(..., description="Role of the message sender (user, assistant)")
    content: str = Field(..., description="Content of the message")
    sources: list[str] | None = Field(None, description="Source documents cited by the message")


class SaveChatRequest(BaseModel):
    """Request model for saving a conversation."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(None, description="Title (required for new conversations)")
    messages: list[ChatMessageModel] = Field(default_factory=list, description="Messages to save")
    conversation_id: str | None = Field(
        None, alias="conversationId", description="Existing conversation to append to"
    )


class SaveChatResponse(BaseModel):
    """Saved conversation identity."""

    id: str | int = Field(..., description="Conversation id")
    title: str | None = Field(None, description="Conversation title")


class ConversationHistoryResponse(BaseModel):
    """Recent conversations."""

    conversations: list[dict] = Field(default_factory=list, description="Most recent first")


class LoadChatResponse(BaseModel):
    """A conversation and its messages."""

    conversation: dict = Field(..., description="Conversation header")
    messages: list[dict] = Field(default_factory=list, description="Messages oldest first")


class ExportRequest(BaseModel):
    """Request model for exporting a transcript."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field("", description="Export title")
    content: str = Field("", description="Exported content")
    type: str = Field("", description="Export format: pdf or doc")
    conversation_id: str | None = Field(None, alias="conversationId", description="Source conversation")


class PdfExportRequest(BaseModel):
    """Request model for rendering an HTML export as PDF."""

    html: str = Field("", description="Complete HTML document to render")
    filename: str | None = Field(None, description="Download file name (default document.pdf)")


class ExportResponse(BaseModel):
    """Created export."""

    id: str | int = Field(..., description="Export id")
    message: str = Field(..., description="Status message")


class GenerateNotesRequest(BaseModel):
    """Request model for queueing note regeneration."""

    model_config = ConfigDict(populate_by_name=True)

    collection_id: str = Field(..., alias="collectionId", description="Collection to regenerate")


class GenerateNotesResponse(BaseModel):
    """Queued note regeneration."""

    ok: bool = Field(True, description="Always true once the request was accepted")
    data: list[dict] | None = Field(None, description="Inserted request rows, when stored")


class ProcessedDocumentModel(BaseModel):
    """A document processed by an upload."""

    id: str = Field(..., description="Document row id (temp-* when not saved)")
    name: str = Field(..., description="Original file name")
    status: str = Field(..., description="completed or error")
    url: str | None = Field(None, description="Public URL of the stored original file")


class UploadResponse(BaseModel):
    """Response model for an upload batch."""

    success: bool = Field(True, description="Whether notes were produced")
    collection_id: str = Field(..., alias="collectionId", description="Created collection id")
    collection_name: str = Field(..., alias="collectionName", description="Collection name")
    documents: list[ProcessedDocumentModel] = Field(default_factory=list)
    notes_id: str | None = Field(None, alias="notesId", description="Saved notes row id")
    notes_saved: bool = Field(False, alias="notesSaved")
    notes_generated: bool = Field(False, alias="notesGenerated")
    files_saved: int = Field(0, alias="filesSaved", description="Documents stored in the database")
    total_files: int = Field(0, alias="totalFiles", description="Documents processed")
    errors: list[str] = Field(default_factory=list, description="Per-file extraction problems")
    error: str | None = Field(None, description="Non-fatal error message")

    model_config = ConfigDict(populate_by_name=True)


class CredentialStatus(BaseModel):
    """Masked diagnostics for one credential."""

    exists: bool
    length: int = 0
    starts_with_expected_prefix: bool | None = None
    preview: str | None = None


class ConfigCheckResponse(BaseModel):
    """Which credentials are configured."""

    openrouter: CredentialStatus
    openai: CredentialStatus
    supabase_url: bool
    supabase_anon_key: bool


class KeyCheckResponse(BaseModel):
    """Outcome of one live completion with the configured key."""

    status: int = Field(..., description="HTTP status returned by OpenRouter")
    status_text: str = Field("", description="HTTP reason phrase")
    ok: bool = Field(..., description="Whether the status was 2xx")
    response: str = Field("", description="First 500 characters of the response body")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    embeddings: str = Field(..., description="configured or fallback")
    chat: str = Field(..., description="configured or missing")


class ErrorDetail(BaseModel):
    """Structured error detail information."""

    type: str = Field(..., description="Exception type name")
    code: str = Field(..., description="Error code (e.g., SN_EXT_002)")
    message: str = Field(..., description="Human-readable error message")


class ErrorLocation(BaseModel):
    """Source location where error occurred."""

    model_config = ConfigDict(populate_by_name=True)

    class_name: str = Field(..., alias="class", description="Class name or <module>")
    method: str = Field(..., description="Method/function name")
    file: str = Field(..., description="Source file name")
    line: int = Field(..., description="Line number")
    timestamp: str | None = Field(None, description="When the error occurred")


class ErrorResponse(BaseModel):
    """Response model for structured errors.

    Example:
        {
            "error": {"type": "NoTextExtractedError", "code": "SN_EXT_005", "message": "..."},
            "location": {"class": "UploadService", "method": "process", ...},
            "context": {"errors": ["slides.bin: Unsupported file type: ..."]},
            "stack_trace": ["Traceback...", ...]  # Only in debug mode
        }
    """

    error: ErrorDetail = Field(..., description="Error details including type, code, and message")
    location: ErrorLocation | None = Field(None, description="Source location of the error")
    context: dict | None = Field(None, description="Additional debugging context")
    cause: dict | None = Field(None, description="Underlying exception that caused this error")
    stack_trace: list[str] | None = Field(None, description="Stack trace (debug mode only)")
