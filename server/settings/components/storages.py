"""Django storage configuration for upload backends ("disks").

Each alias in ``STORAGES`` is a backend id an upload policy can target:
- ``default``: local filesystem under ``MEDIA_ROOT``
- ``s3``: S3-compatible object store (MinIO locally, Cloudflare R2 in prod)

Both S3 flavours use the same django-storages S3Storage backend.
"""

from typing import Any, Final

from server.settings.components import config

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
        'OPTIONS': {
            'allow_overwrite': True,  # Same content hash, same file
        },
    },
    's3': {
        'BACKEND': 'server.apps.uploads.infrastructure.storage.UploadStorage',
        'OPTIONS': {
            'bucket_name': config('AWS_STORAGE_BUCKET_NAME', default='uploads'),
            'access_key': config('AWS_ACCESS_KEY_ID', default=None),
            'secret_key': config('AWS_SECRET_ACCESS_KEY', default=None),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': config(
                'AWS_S3_REGION_NAME',
                default='auto',
            ),
            'custom_domain': config('AWS_S3_CUSTOM_DOMAIN', default=None),
            'querystring_auth': config(
                'AWS_QUERYSTRING_AUTH',
                cast=bool,
                default=False,
            ),
            'file_overwrite': True,  # Same content hash, same key
            'default_acl': None,  # Inherit bucket ACL
        },
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
