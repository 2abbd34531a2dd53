"""URLs of stored uploads."""

from typing import NamedTuple, final
from urllib.parse import urlsplit

from server.apps.uploads.infrastructure.storage import LOCAL_DRIVER, ObjectStore


class ResolvedUrls(NamedTuple):
    """Absolute and app-relative URL of a stored object."""

    absolute_url: str
    relative_url: str


@final
class UrlResolver:
    """Builds URLs for a storage path on a given disk.

    Local disks are served through the application, so their URLs come
    from the storage itself and a host-relative one (e.g. '/media/a.png')
    is joined to the application URL. Remote disks can sit behind a public
    base URI (CDN), which then wins over the storage's own URL.
    """

    def __init__(self, store: ObjectStore, app_url: str = '') -> None:
        """Initialize resolver.

        Args:
            store: Object store that knows the disks.
            app_url: Application base URL for disks without URLs.
        """
        self._store = store
        self._app_url = app_url.rstrip('/')

    def resolve(
        self,
        path: str,
        backend_id: str,
        base_uri: str | None = None,
    ) -> ResolvedUrls:
        """Resolve URLs for a stored path.

        Args:
            path: Storage path (e.g., 'avatars/a.png').
            backend_id: Disk the path is stored on.
            base_uri: Public base URI for remote disks.

        Returns:
            Absolute and relative URL.
        """
        relative_url = '/' + path.lstrip('/')

        if base_uri and self._store.driver_kind(backend_id) != LOCAL_DRIVER:
            absolute_url = f"{base_uri.rstrip('/')}/{path}"
        else:
            absolute_url = self._absolute(
                self._store.url_for(path, backend_id),
                relative_url,
            )

        return ResolvedUrls(absolute_url, relative_url)

    def _absolute(self, disk_url: str | None, relative_url: str) -> str:
        if disk_url is None:
            return f'{self._app_url}{relative_url}'
        if urlsplit(disk_url).netloc:
            return disk_url
        return f"{self._app_url}/{disk_url.lstrip('/')}"
