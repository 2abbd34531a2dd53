"""Stored filename generation."""

import enum
import mimetypes
from typing import Final, final

from django.utils.crypto import get_random_string

from server.apps.uploads.infrastructure.incoming import IncomingFile

_RANDOM_NAME_LENGTH: Final = 40


@final
class NamingMode(enum.Enum):
    """How the stored filename is derived from the upload.

    Values are the ``filename_type`` settings keys.
    """

    ORIGINAL = 'original'
    CONTENT_HASH = 'md5_file'
    RANDOM = 'random'


DEFAULT_NAMING_MODE: Final = NamingMode.CONTENT_HASH


def generate_filename(mode: NamingMode, file: IncomingFile) -> str:
    """Generate the name a file is stored under.

    ORIGINAL returns the client-declared name as is. It is not
    sanitized; only use it for trusted uploaders.

    Args:
        mode: Naming mode from the policy.
        file: Uploaded file.

    Returns:
        Filename with extension (e.g., '0cc175b9c0f1b6a831c399e269772661.png').
    """
    if mode is NamingMode.ORIGINAL:
        return file.original_name
    if mode is NamingMode.CONTENT_HASH:
        return _with_extension(file.content_hash(), file.extension)
    return _with_extension(
        get_random_string(_RANDOM_NAME_LENGTH),
        _guess_extension(file),
    )


def _guess_extension(file: IncomingFile) -> str:
    """Guess extension from the declared MIME type.

    Falls back to the client extension for unknown types.
    """
    if file.mime_type:
        guessed = mimetypes.guess_extension(file.mime_type)
        if guessed:
            return guessed.lstrip('.')
    return file.extension


def _with_extension(stem: str, extension: str) -> str:
    if not extension:
        return stem
    return f'{stem}.{extension}'
