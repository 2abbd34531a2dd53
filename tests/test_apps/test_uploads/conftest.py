"""Shared fixtures for uploads app tests."""

from datetime import UTC, datetime

import boto3
import pytest
from django.core.files.storage import FileSystemStorage, InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from moto import mock_aws

from server.apps.uploads.infrastructure.incoming import IncomingFile
from server.apps.uploads.infrastructure.storage import DjangoObjectStore

# Smallest byte sequence that starts like a PNG file
_PNG_CONTENT = b'\x89PNG\r\n\x1a\n' + b'\x00' * 24

_FIXED_NOW = datetime(2024, 3, 7, 8, 9, 5, tzinfo=UTC)


class _ReplacingMemoryStorage(InMemoryStorage):
    """In-memory disk that replaces objects in place, like S3."""

    def get_available_name(self, name, max_length=None):
        return name

    def _save(self, name, content):
        if self.exists(name):
            self.delete(name)
        return super()._save(name, content)


def _make_incoming(
    content: bytes = _PNG_CONTENT,
    name: str = 'photo.png',
    content_type: str = 'image/png',
) -> IncomingFile:
    """Build an incoming file from bytes.

    Args:
        content: File content.
        name: Client-declared filename.
        content_type: Client-declared MIME type.

    Returns:
        IncomingFile wrapping an in-memory upload.
    """
    uploaded = SimpleUploadedFile(name, content, content_type=content_type)
    return IncomingFile(uploaded)


@pytest.fixture
def png_file():
    """Uploaded PNG image.

    Returns:
        IncomingFile named photo.png.
    """
    return _make_incoming()


@pytest.fixture
def local_storage(tmp_path):
    """Filesystem storage in a temporary directory.

    Returns:
        FileSystemStorage serving files under /media/, replacing
        existing files on save.
    """
    return FileSystemStorage(
        location=tmp_path,
        base_url='/media/',
        allow_overwrite=True,
    )


@pytest.fixture
def memory_storage():
    """In-memory storage standing in for a remote disk.

    Returns:
        In-memory storage serving files under /media/.
    """
    return _ReplacingMemoryStorage(base_url='/media/')


@pytest.fixture
def object_store(local_storage, memory_storage):
    """Object store with a local and a remote disk.

    Returns:
        DjangoObjectStore with 'local' and 'remote' aliases.
    """
    return DjangoObjectStore({
        'local': local_storage,
        'remote': memory_storage,
    })


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2024-03-07 08:09:05 UTC.

    Returns:
        Callable returning the fixed moment.
    """
    return lambda: _FIXED_NOW


@pytest.fixture
def mock_s3():
    """Mock S3 service with uploads bucket.

    Yields:
        boto3 S3 resource with uploads bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket='uploads')
        yield conn


@pytest.fixture
def png_content():
    """Raw bytes of the sample PNG.

    Returns:
        PNG file content.
    """
    return _PNG_CONTENT


@pytest.fixture
def make_incoming():
    """Factory for incoming files.

    Returns:
        Callable taking content, name and content_type.
    """
    return _make_incoming
