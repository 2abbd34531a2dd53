"""Policy records read from Django settings."""

from collections.abc import Mapping
from typing import Any, final

from django.conf import settings


@final
class SettingsPolicyStore:
    """Loads raw upload policies from ``settings.UPLOADER['strategies']``."""

    def load_policy(self, name: str) -> Mapping[str, Any]:
        """Get the raw policy record stored under a name.

        Args:
            name: Strategy name, 'default' for the base record.

        Returns:
            Policy record, empty if no strategy has that name.
        """
        uploader = getattr(settings, 'UPLOADER', {})
        return uploader.get('strategies', {}).get(name, {})
