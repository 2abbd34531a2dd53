"""Upload strategy settings.

``UPLOADER['strategies']`` maps a strategy name to its raw policy record.
Every named strategy is merged over ``default``, so a record only lists
the keys it changes. Recognised keys:

- ``disk``: storage alias from ``STORAGES``
- ``mimes``: allowed MIME types, ``['*']`` accepts anything
- ``name``: multipart form field holding the file
- ``directory``: target directory, supports ``{Y} {m} {d} {H} {i} {s}``
- ``max_size``: human readable limit (``'10M'``), ``0`` disables it
- ``filename_type``: ``original``, ``md5_file`` or ``random``
"""

from typing import Any, Final

from server.settings.components import config

UPLOADER: Final[dict[str, Any]] = {
    # Public prefix for remote disks (CDN in front of the bucket)
    'base_uri': config('UPLOADER_BASE_URI', default=''),

    # Application URL used when a disk cannot build URLs itself
    'app_url': config('UPLOADER_APP_URL', default='http://localhost:8000'),

    'strategies': {
        'default': {
            'disk': config('UPLOADER_DISK', default='default'),
            'mimes': ['*'],
            'name': 'file',
            'directory': 'uploads/{Y}/{m}/{d}',
            'max_size': config('UPLOADER_MAX_SIZE', default='2M'),
            'filename_type': 'md5_file',
        },
        'avatar': {
            'mimes': ['image/jpeg', 'image/png', 'image/gif', 'image/webp'],
            'directory': 'avatars/{Y}/{m}',
            'max_size': '1M',
        },
        'attachment': {
            'name': 'attachment',
            'directory': 'attachments/{Y}/{m}/{d}',
            'max_size': '20M',
            'filename_type': 'random',
        },
    },
}
