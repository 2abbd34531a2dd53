"""Outcome of an upload."""

import json
from dataclasses import dataclass
from typing import Any, Literal, final

from server.apps.uploads.exceptions import StoreFailedError


@final
@dataclass(frozen=True, slots=True)
class Response:
    """Description of an uploaded file and where it was stored.

    ``path`` is empty when the storage backend did not persist the file.
    """

    path: str
    disk: str
    mime: str | None
    size: int
    filename: str
    extension: str
    original_name: str
    strategy: str
    url: str
    relative_url: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the flat mapping returned to clients.

        Returns:
            Response fields plus ``location``, a legacy alias of ``url``.
        """
        return {
            'mime': self.mime,
            'size': self.size,
            'path': self.path,
            'url': self.url,
            'disk': self.disk,
            'filename': self.filename,
            'extension': self.extension,
            'relative_url': self.relative_url,
            'location': self.url,
            'original_name': self.original_name,
            'strategy': self.strategy,
        }

    def to_json(self, **kwargs: Any) -> str:
        """Serialize to JSON.

        Args:
            kwargs: Passed through to ``json.dumps``.

        Returns:
            JSON document of ``to_dict()``.
        """
        return json.dumps(self.to_dict(), **kwargs)


@final
@dataclass(frozen=True, slots=True)
class UploadSucceeded:
    """The file is stored at ``response.path``."""

    response: Response
    ok: Literal[True] = True

    def raise_for_status(self) -> Response:
        """Return the response, uploads that succeeded never raise."""
        return self.response


@final
@dataclass(frozen=True, slots=True)
class UploadFailed:
    """The backend reported that the file was not stored.

    ``response`` keeps the file metadata, its ``path`` is empty.
    """

    response: Response
    ok: Literal[False] = False

    def raise_for_status(self) -> Response:
        """Raise for the failed write.

        Raises:
            StoreFailedError: Always.
        """
        raise StoreFailedError(
            self.response.disk,
            self.response.original_name,
        )


UploadOutcome = UploadSucceeded | UploadFailed
