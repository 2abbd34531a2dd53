"""Tests for file validation."""

import pytest

from server.apps.uploads.exceptions import (
    MimeRejectedError,
    SizeExceededError,
    UploadValidationError,
    ValidationReason,
)
from server.apps.uploads.logic.validation import FileValidator


def test_wildcard_accepts_any_mime(make_incoming):
    """Test ['*'] accepts every MIME type."""
    validator = FileValidator(['*'], max_bytes=0)

    validator.validate(make_incoming(content_type='application/x-anything'))


def test_listed_mime_passes(png_file):
    """Test a listed MIME type passes."""
    validator = FileValidator(['image/png', 'image/jpeg'], max_bytes=0)

    validator.validate(png_file)


def test_unlisted_mime_rejected(make_incoming):
    """Test MIME type outside the list is rejected."""
    validator = FileValidator(['image/png'], max_bytes=0)
    file = make_incoming(name='photo.jpg', content_type='image/jpeg')

    with pytest.raises(MimeRejectedError, match='Invalid mime "image/jpeg"') as exc_info:
        validator.validate(file)

    assert exc_info.value.reason is ValidationReason.MIME_REJECTED
    assert exc_info.value.status_code == 422


def test_mime_match_is_case_sensitive(make_incoming):
    """Test MIME types are compared exactly."""
    validator = FileValidator(['image/png'], max_bytes=0)

    with pytest.raises(MimeRejectedError):
        validator.validate(make_incoming(content_type='IMAGE/PNG'))


def test_wildcard_mixed_with_types_is_not_wildcard(make_incoming):
    """Test '*' only acts as wildcard when it is the only entry."""
    validator = FileValidator(['*', 'image/png'], max_bytes=0)

    with pytest.raises(MimeRejectedError):
        validator.validate(make_incoming(content_type='text/plain'))


def test_size_over_limit_rejected(make_incoming):
    """Test files larger than the limit are rejected."""
    validator = FileValidator(['*'], max_bytes=1000)
    file = make_incoming(content=b'x' * 1001)

    with pytest.raises(SizeExceededError, match='1001') as exc_info:
        validator.validate(file)

    assert exc_info.value.reason is ValidationReason.SIZE_EXCEEDED
    assert exc_info.value.size_bytes == 1001
    assert exc_info.value.max_bytes == 1000


def test_size_at_limit_passes(make_incoming):
    """Test files exactly at the limit pass."""
    validator = FileValidator(['*'], max_bytes=1000)

    validator.validate(make_incoming(content=b'x' * 1000))


def test_zero_limit_is_unlimited(make_incoming):
    """Test max size 0 never rejects on size."""
    validator = FileValidator(['*'], max_bytes=0)

    validator.validate(make_incoming(content=b'x' * 100_000))


def test_mime_checked_before_size(make_incoming):
    """Test a file failing both checks reports the MIME type."""
    validator = FileValidator(['image/png'], max_bytes=1)
    file = make_incoming(content=b'too big', content_type='text/plain')

    with pytest.raises(UploadValidationError) as exc_info:
        validator.validate(file)

    assert exc_info.value.reason is ValidationReason.MIME_REJECTED
