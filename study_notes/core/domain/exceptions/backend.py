"""Backend service exceptions for AI Study Notes."""

from .base import StudyNotesError


class BackendError(StudyNotesError):
    """Base error for backend service (auth, tables, storage) operations."""

    error_code = "SN_BCK_001"


class AuthenticationError(BackendError):
    """Caller could not be authenticated against the backend."""

    error_code = "SN_BCK_002"


class BackendQueryError(BackendError):
    """Table or RPC request failed."""

    error_code = "SN_BCK_003"

    @property
    def is_missing_table(self) -> bool:
        """Whether the backend reported the table does not exist."""
        code = str(self.extra_context.get("code", ""))
        return code in {"42P01", "PGRST205"} or "does not exist" in self.message


class StorageUploadError(BackendError):
    """Blob upload to the storage bucket failed."""

    error_code = "SN_BCK_004"


class NotFoundError(BackendError):
    """Requested row does not exist or is not owned by the caller."""

    error_code = "SN_BCK_005"
