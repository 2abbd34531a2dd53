"""Exceptions for uploads app."""

import enum
from http import HTTPStatus
from typing import ClassVar, final


class UploadError(Exception):
    """Base class for upload errors surfaced to the client."""

    status_code: ClassVar[int] = HTTPStatus.BAD_REQUEST


@final
class ValidationReason(enum.Enum):
    """Why an uploaded file was rejected."""

    MIME_REJECTED = 'mime_rejected'
    SIZE_EXCEEDED = 'size_exceeded'


class UploadValidationError(UploadError):
    """Raised when an uploaded file violates its policy.

    Nothing has been written when this is raised.
    """

    status_code: ClassVar[int] = HTTPStatus.UNPROCESSABLE_ENTITY
    reason: ClassVar[ValidationReason]

    def __init__(self, detail: str) -> None:
        """Initialize UploadValidationError.

        Args:
            detail: Human-readable message naming the offending value.
        """
        self.detail = detail
        super().__init__(detail)


@final
class MimeRejectedError(UploadValidationError):
    """Raised when the declared MIME type is not allowed."""

    reason = ValidationReason.MIME_REJECTED

    def __init__(self, mime_type: str | None) -> None:
        """Initialize MimeRejectedError.

        Args:
            mime_type: Client-declared MIME type of the file.
        """
        self.mime_type = mime_type
        super().__init__(f'Invalid mime "{mime_type}".')


@final
class SizeExceededError(UploadValidationError):
    """Raised when the file is larger than the policy allows."""

    reason = ValidationReason.SIZE_EXCEEDED

    def __init__(self, size_bytes: int, max_bytes: int) -> None:
        """Initialize SizeExceededError.

        Args:
            size_bytes: Size of the uploaded file.
            max_bytes: Limit configured on the policy.
        """
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(f'File has too large size("{size_bytes}").')


@final
class MissingFileError(UploadError):
    """Raised when the request has no file under the expected form field."""

    status_code: ClassVar[int] = HTTPStatus.UNPROCESSABLE_ENTITY

    def __init__(self, field_name: str) -> None:
        """Initialize MissingFileError.

        Args:
            field_name: Form field the policy reads the file from.
        """
        self.field_name = field_name
        super().__init__(f'No file "{field_name}" uploaded.')


@final
class StoreFailedError(UploadError):
    """Raised on demand when the storage backend did not persist a file."""

    status_code: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, disk: str, original_name: str) -> None:
        """Initialize StoreFailedError.

        Args:
            disk: Backend id the write was sent to.
            original_name: Client-declared name of the file.
        """
        self.disk = disk
        self.original_name = original_name
        super().__init__(
            f'Failed to store "{original_name}" on disk "{disk}".',
        )
