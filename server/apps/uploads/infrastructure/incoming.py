"""Read-only view of a file received in an upload request."""

import hashlib
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Final, final

from django.core.files.uploadedfile import UploadedFile

_CHUNK_SIZE: Final = 64 * 1024  # 64KB chunks for hashing


@final
class IncomingFile:
    """Uploaded file as seen by the upload pipeline.

    Wraps Django's ``UploadedFile``. Name and MIME type are the values the
    client declared and must be treated as untrusted. The underlying
    temporary file belongs to the request; it is closed by ``open()``
    once the pipeline is done with it.
    """

    def __init__(self, uploaded_file: UploadedFile) -> None:
        """Initialize incoming file.

        Args:
            uploaded_file: File taken from ``request.FILES``.
        """
        self._file = uploaded_file

    @property
    def uploaded_file(self) -> UploadedFile:
        """Get the wrapped Django uploaded file."""
        return self._file

    @property
    def original_name(self) -> str:
        """Get the client-declared filename, including extension."""
        return self._file.name or ''

    @property
    def extension(self) -> str:
        """Get the client-declared extension without dot.

        Case is preserved. Returns empty string if there is none.
        """
        return Path(self.original_name).suffix.lstrip('.')

    @property
    def mime_type(self) -> str | None:
        """Get the client-declared MIME type."""
        return self._file.content_type

    @property
    def size(self) -> int:
        """Get file size in bytes."""
        return self._file.size or 0

    @property
    def temporary_path(self) -> str | None:
        """Get the temporary location on disk.

        Returns:
            Path of the temporary file, or None for in-memory uploads.
        """
        if hasattr(self._file, 'temporary_file_path'):
            return self._file.temporary_file_path()
        return None

    def content_hash(self) -> str:
        """Calculate MD5 hash of the full content.

        Reads the file in chunks and leaves the pointer at the beginning.

        Returns:
            Hex-encoded MD5 digest.
        """
        md5_hash = hashlib.md5(usedforsecurity=False)
        for chunk in self._file.chunks(_CHUNK_SIZE):
            md5_hash.update(chunk)
        self._file.seek(0)
        return md5_hash.hexdigest()

    @contextmanager
    def open(self) -> Iterator[UploadedFile]:
        """Open the file for reading and close it afterwards.

        The handle is released on every exit path, including errors
        raised by the caller.

        Yields:
            The uploaded file positioned at the beginning.
        """
        stream = self._file.open('rb')
        try:
            yield stream
        finally:
            stream.close()
