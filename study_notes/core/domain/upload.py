"""Upload pipeline results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AuthenticatedUser:
    """User resolved from the caller's access token."""

    id: str
    email: str | None = None


@dataclass(frozen=True)
class FileProblem:
    """Why one file in an upload batch produced no text."""

    file_name: str
    message: str

    def __str__(self) -> str:
        return f"{self.file_name}: {self.message}"


@dataclass(frozen=True)
class ProcessedDocument:
    """A file that was extracted and (possibly) persisted.

    ``status`` is ``"completed"`` when the document row was saved and
    ``"error"`` when only the text survived. ``url`` links to the stored
    original file.
    """

    id: str
    name: str
    status: str
    url: str | None = None


@dataclass
class UploadResult:
    """Outcome of one upload batch."""

    collection_id: str
    collection_name: str
    documents: list[ProcessedDocument] = field(default_factory=list)
    errors: list[FileProblem] = field(default_factory=list)
    notes_id: str | None = None
    notes_saved: bool = False
    notes_generated: bool = False
    error_message: str | None = None

    @property
    def files_saved(self) -> int:
        return sum(1 for doc in self.documents if doc.status == "completed")

    @property
    def total_files(self) -> int:
        return len(self.documents)
