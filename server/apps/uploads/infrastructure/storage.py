"""Storage backends ("disks") used by the upload pipeline."""

import logging
from collections.abc import Mapping
from typing import IO, Any, Final, Protocol, final, override

from botocore.exceptions import BotoCoreError, ClientError
from django.core.exceptions import SuspiciousFileOperation
from django.core.files.base import File as DjangoFile
from django.core.files.storage import FileSystemStorage, Storage, storages
from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)

# Driver kind of disks living on the local filesystem
LOCAL_DRIVER: Final = 'local'
S3_DRIVER: Final = 's3'

# Errors a backend raises when a write did not go through
_STORE_ERRORS: Final = (
    OSError,
    SuspiciousFileOperation,
    BotoCoreError,
    ClientError,
)

_VISIBILITY_ACLS: Final = {
    'public': 'public-read',
    'private': 'private',
}


class ObjectStore(Protocol):
    """Capability the upload pipeline needs from storage."""

    def put(
        self,
        path: str,
        content: IO[bytes],
        backend_id: str,
        options: Mapping[str, Any],
    ) -> bool:
        """Persist content at path, return whether it succeeded."""

    def url_for(self, path: str, backend_id: str) -> str | None:
        """Return the backend's own URL for path, if it can build one."""

    def driver_kind(self, backend_id: str) -> str:
        """Return the driver kind of the backend (e.g. 'local', 's3')."""


@final
class UploadContent(DjangoFile):
    """Upload stream together with the object parameters of its write."""

    def __init__(
        self,
        stream: IO[bytes],
        object_parameters: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize content.

        Args:
            stream: Readable binary stream.
            object_parameters: S3 put parameters (e.g., ACL, CacheControl).
        """
        super().__init__(stream)
        self.object_parameters = dict(object_parameters or {})


@final
class UploadStorage(S3Storage):
    """S3 storage backend for uploaded files.

    Objects written from ``UploadContent`` get its object parameters on
    top of the configured ones, so a single upload can set its own ACL,
    content type or cache headers.
    """

    @override
    def _get_write_parameters(
        self,
        name: str,
        content: Any = None,
    ) -> dict[str, Any]:
        params = super()._get_write_parameters(name, content)
        upload_params = getattr(content, 'object_parameters', None)
        if upload_params:
            logger.debug(
                'Upload parameters for %s: %s',
                name,
                ', '.join(sorted(upload_params)),
            )
            params.update(upload_params)
        return params


def object_parameters(options: Mapping[str, Any]) -> dict[str, Any]:
    """Translate upload write options to S3 object parameters.

    ``visibility`` ('public' or 'private') becomes a canned ``ACL``
    unless one is given, every other key is passed through as is.

    Args:
        options: Write options without the store-level ``overwrite`` key.

    Returns:
        Object parameters for the S3 put.

    Raises:
        ValueError: If visibility is not 'public' or 'private'.
    """
    parameters = dict(options)
    visibility = parameters.pop('visibility', None)
    if visibility is not None:
        if visibility not in _VISIBILITY_ACLS:
            raise ValueError(f'Unknown visibility "{visibility}"')
        parameters.setdefault('ACL', _VISIBILITY_ACLS[visibility])
    return parameters


@final
class DjangoObjectStore:
    """Object store backed by Django storages, addressed by alias.

    Backend ids are the aliases of ``settings.STORAGES``. A different
    mapping of alias to storage can be passed for tests.

    Replacing an object is left to the backend: S3 disks need
    ``file_overwrite`` and filesystem disks ``allow_overwrite``. A
    backend that picks another name instead is treated as a failed write.
    """

    def __init__(self, handler: Mapping[str, Storage] | None = None) -> None:
        """Initialize object store.

        Args:
            handler: Alias to storage mapping, defaults to Django's storages.
        """
        self._handler = storages if handler is None else handler

    def get_storage(self, backend_id: str) -> Storage:
        """Get the storage configured under an alias.

        Args:
            backend_id: Storage alias (e.g., 'default', 's3').

        Returns:
            Storage instance.
        """
        return self._handler[backend_id]

    def put(
        self,
        path: str,
        content: IO[bytes],
        backend_id: str,
        options: Mapping[str, Any],
    ) -> bool:
        """Write content to a backend under exactly the given path.

        Options:
            overwrite: Replace an existing object at path (default True).
                With False an existing object makes the write fail.
            visibility: 'public' or 'private', S3 disks only.
            Any other key is an S3 object parameter (e.g., ContentType,
            CacheControl). Disks that cannot take them log and ignore them.

        Nothing is left behind at another name when the write fails.

        Args:
            path: Storage path (e.g., 'avatars/2024/03/abc.png').
            content: Readable binary stream.
            backend_id: Storage alias.
            options: Write options.

        Returns:
            True if the object is stored at path, False otherwise.

        Raises:
            ValueError: If the visibility option is invalid.
        """
        storage = self.get_storage(backend_id)
        write_options = dict(options)
        overwrite = write_options.pop('overwrite', True)
        parameters = object_parameters(write_options)
        if parameters and not isinstance(storage, UploadStorage):
            logger.warning(
                'Disk %s ignores write options: %s',
                backend_id,
                ', '.join(sorted(parameters)),
            )
            parameters = {}

        try:
            if not overwrite and storage.exists(path):
                logger.warning(
                    'Object already exists on disk %s: %s',
                    backend_id,
                    path,
                )
                return False
            saved_name = storage.save(path, UploadContent(content, parameters))
        except _STORE_ERRORS:
            logger.exception(
                'Failed to store object on disk %s: %s',
                backend_id,
                path,
            )
            return False

        if saved_name != path:
            logger.warning(
                'Disk %s stored %s under a different name, removing %s',
                backend_id,
                path,
                saved_name,
            )
            self._discard(storage, saved_name, backend_id)
            return False
        return True

    def url_for(self, path: str, backend_id: str) -> str | None:
        """Ask the backend for the URL of a stored object.

        Args:
            path: Storage path.
            backend_id: Storage alias.

        Returns:
            URL, or None if the backend does not serve URLs.
        """
        storage = self.get_storage(backend_id)
        try:
            return storage.url(path)
        except (NotImplementedError, ValueError):
            logger.debug('Disk %s cannot build URLs', backend_id)
            return None

    def driver_kind(self, backend_id: str) -> str:
        """Classify the backend behind an alias.

        Args:
            backend_id: Storage alias.

        Returns:
            'local' for filesystem storages, 's3' for S3-compatible ones,
            otherwise the lowercased backend class name.
        """
        storage = self.get_storage(backend_id)
        if isinstance(storage, FileSystemStorage):
            return LOCAL_DRIVER
        if isinstance(storage, S3Storage):
            return S3_DRIVER
        return type(storage).__name__.lower()

    def _discard(self, storage: Storage, name: str, backend_id: str) -> None:
        try:
            storage.delete(name)
        except _STORE_ERRORS:
            logger.exception(
                'Failed to remove stray object on disk %s: %s',
                backend_id,
                name,
            )
