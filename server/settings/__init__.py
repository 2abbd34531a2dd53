"""Django settings for the uploader project.

Settings are split into components and combined with django-split-settings.
Every value that differs between environments is read through
python-decouple, see ``server.settings.components.config``.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/uploader.py',
)
