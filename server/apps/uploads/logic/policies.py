"""Upload policy resolution.

A policy ("strategy") is the set of rules one upload is checked and
stored with. Named policies only list what they change: they are merged
over the ``default`` policy before use.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final, Protocol, final

from django.core.exceptions import ImproperlyConfigured

from server.apps.uploads.logic.naming import DEFAULT_NAMING_MODE, NamingMode
from server.apps.uploads.logic.sizes import to_bytes
from server.apps.uploads.logic.validation import ANY_MIME

logger = logging.getLogger(__name__)

DEFAULT_POLICY: Final = 'default'

# Storage alias used when a policy names no disk
_DEFAULT_DISK: Final = 'default'
_DEFAULT_FORM_FIELD: Final = 'file'


class PolicyStore(Protocol):
    """Source of raw policy records."""

    def load_policy(self, name: str) -> Mapping[str, Any]:
        """Return the record stored under name, empty if unknown."""


@final
@dataclass(frozen=True, slots=True)
class Policy:
    """Resolved upload policy."""

    name: str
    backend_id: str
    allowed_mimes: frozenset[str]
    max_bytes: int
    directory_template: str
    naming_mode: NamingMode
    form_field_name: str

    def __post_init__(self) -> None:
        """Check policy invariants.

        Raises:
            ImproperlyConfigured: If a limit or the MIME list is invalid.
        """
        if self.max_bytes < 0:
            raise ImproperlyConfigured(
                f'Upload policy "{self.name}" has negative max size',
            )
        if not self.allowed_mimes:
            raise ImproperlyConfigured(
                f'Upload policy "{self.name}" allows no mime types',
            )

    @classmethod
    def from_record(cls, name: str, record: Mapping[str, Any]) -> 'Policy':
        """Build a policy from a raw settings record.

        Args:
            name: Strategy name the record was resolved for.
            record: Merged record with the ``UPLOADER`` strategy keys.

        Returns:
            Policy instance.

        Raises:
            ImproperlyConfigured: If the record holds invalid values.
        """
        mimes = record.get('mimes')
        if mimes is None:
            mimes = [ANY_MIME]
        elif isinstance(mimes, str):
            mimes = [mimes]

        filename_type = record.get('filename_type') or DEFAULT_NAMING_MODE.value
        try:
            naming_mode = NamingMode(filename_type)
        except ValueError as error:
            raise ImproperlyConfigured(
                f'Upload policy "{name}" has unknown filename_type '
                f'"{filename_type}"',
            ) from error

        return cls(
            name=name,
            backend_id=record.get('disk') or _DEFAULT_DISK,
            allowed_mimes=frozenset(mimes),
            max_bytes=to_bytes(record.get('max_size') or 0),
            directory_template=record.get('directory') or '',
            naming_mode=naming_mode,
            form_field_name=record.get('name') or _DEFAULT_FORM_FIELD,
        )


def merge_recursive(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
) -> dict[str, Any]:
    """Merge override over base, key by key at every nesting level.

    Nested mappings are merged, any other value in override (lists
    included) replaces the one in base. Neither input is modified.

    Args:
        base: Record providing defaults.
        override: Record whose values win.

    Returns:
        New merged dictionary.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_recursive(current, value)
        else:
            merged[key] = value
    return merged


@final
class PolicyResolver:
    """Resolves a strategy name to a policy merged over the default."""

    def __init__(self, store: PolicyStore) -> None:
        """Initialize resolver.

        Args:
            store: Source of raw policy records.
        """
        self._store = store

    def load(self, name: str | None = None) -> dict[str, Any]:
        """Load the merged raw record for a strategy.

        Args:
            name: Strategy name, None or 'default' for the default one.

        Returns:
            Default record with the named record merged over it.
        """
        default_record = self._store.load_policy(DEFAULT_POLICY)
        if not name or name == DEFAULT_POLICY:
            return dict(default_record)

        named_record = self._store.load_policy(name)
        if not named_record:
            logger.warning(
                'Unknown upload strategy %s, using default',
                name,
            )
        return merge_recursive(default_record, named_record)

    def resolve(self, name: str | None = None) -> Policy:
        """Resolve a strategy name to a policy.

        Args:
            name: Strategy name, None or 'default' for the default one.

        Returns:
            Resolved policy.

        Raises:
            ImproperlyConfigured: If the merged record is invalid.
        """
        policy_name = name or DEFAULT_POLICY
        policy = Policy.from_record(policy_name, self.load(name))
        logger.debug(
            'Resolved upload strategy %s: disk=%s max_bytes=%d',
            policy.name,
            policy.backend_id,
            policy.max_bytes,
        )
        return policy
