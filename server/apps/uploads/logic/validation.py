"""Validation of uploaded files against policy limits."""

import logging
from collections.abc import Iterable
from typing import Final, final

from server.apps.uploads.exceptions import MimeRejectedError, SizeExceededError
from server.apps.uploads.infrastructure.incoming import IncomingFile

logger = logging.getLogger(__name__)

# Allows any MIME type when it is the only entry
ANY_MIME: Final = '*'


@final
class FileValidator:
    """Checks MIME type and size of an uploaded file."""

    def __init__(self, mimes: Iterable[str], max_bytes: int) -> None:
        """Initialize validator.

        Args:
            mimes: Allowed MIME types, ['*'] allows any.
            max_bytes: Size limit in bytes, 0 disables the check.
        """
        self._mimes = frozenset(mimes)
        self._max_bytes = max_bytes

    def validate(self, file: IncomingFile) -> None:
        """Validate the file, MIME type first.

        Args:
            file: Uploaded file.

        Raises:
            MimeRejectedError: If the declared MIME type is not allowed.
            SizeExceededError: If the file is over the size limit.
        """
        if not self.is_valid_mime(file):
            logger.warning('Rejected upload with mime: %s', file.mime_type)
            raise MimeRejectedError(file.mime_type)

        if not self.is_valid_size(file):
            logger.warning(
                'Rejected upload of %d bytes (limit %d)',
                file.size,
                self._max_bytes,
            )
            raise SizeExceededError(file.size, self._max_bytes)

    def is_valid_mime(self, file: IncomingFile) -> bool:
        """Check the declared MIME type against the allowed set."""
        if self._mimes == {ANY_MIME}:
            return True
        return file.mime_type in self._mimes

    def is_valid_size(self, file: IncomingFile) -> bool:
        """Check the file size against the limit."""
        return self._max_bytes == 0 or file.size <= self._max_bytes
