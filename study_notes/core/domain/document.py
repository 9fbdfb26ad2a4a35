"""Document models for the upload and extraction pipeline."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedFile:
    """A file received in an upload request.

    Lives only for the duration of one request.

    Attributes:
        content: Raw file bytes.
        content_type: MIME type declared by the client (may be empty).
        file_name: Original file name.
    """

    content: bytes
    content_type: str
    file_name: str

    @property
    def size(self) -> int:
        """File size in bytes."""
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot, or an empty string."""
        name = self.file_name.lower()
        return name.rsplit(".", 1)[-1] if "." in name else ""


@dataclass(frozen=True)
class ExtractedDocument:
    """Plain text pulled out of one uploaded file."""

    text: str
    source_file_name: str


@dataclass(frozen=True)
class Chunk:
    """A character window over extracted text.

    Attributes:
        content: ``text[start:end]``.
        start: Offset of the first character (inclusive).
        end: Offset after the last character (exclusive).
    """

    content: str
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start
