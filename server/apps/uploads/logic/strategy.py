"""Upload strategy: validate, name, store and describe one uploaded file.

A ``Strategy`` runs a single upload transaction for one file under one
policy::

    RECEIVED -> VALIDATED -> STORED -> COMPLETED
        \\-> REJECTED (validation failed, nothing written)

Collaborators (object store, URL resolver, event hooks) are injected.
``StrategyResolver.from_settings()`` wires the ones configured in Django
settings.
"""

import enum
import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any, final

from django.conf import settings
from django.http import HttpRequest

from server.apps.uploads.exceptions import (
    MissingFileError,
    UploadValidationError,
)
from server.apps.uploads.infrastructure.incoming import IncomingFile
from server.apps.uploads.infrastructure.policies import SettingsPolicyStore
from server.apps.uploads.infrastructure.storage import (
    DjangoObjectStore,
    ObjectStore,
)
from server.apps.uploads.logic.naming import generate_filename
from server.apps.uploads.logic.paths import format_directory
from server.apps.uploads.logic.policies import Policy, PolicyResolver
from server.apps.uploads.logic.response import (
    Response,
    UploadFailed,
    UploadOutcome,
    UploadSucceeded,
)
from server.apps.uploads.logic.urls import UrlResolver
from server.apps.uploads.logic.validation import FileValidator
from server.apps.uploads.signals import EventHook, SignalEventHook

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@final
class UploadState(enum.Enum):
    """Progress of an upload transaction."""

    RECEIVED = 'received'
    VALIDATED = 'validated'
    STORED = 'stored'
    COMPLETED = 'completed'
    REJECTED = 'rejected'


@final
class Strategy:
    """Runs one upload of one file under a resolved policy."""

    def __init__(  # noqa: WPS211
        self,
        policy: Policy,
        file: IncomingFile,
        *,
        store: ObjectStore,
        url_resolver: UrlResolver,
        hooks: Sequence[EventHook] = (),
        base_uri: str = '',
        clock: Clock | None = None,
    ) -> None:
        """Initialize strategy.

        Args:
            policy: Resolved upload policy.
            file: Uploaded file.
            store: Object store the file is written to.
            url_resolver: Builds URLs of the stored file.
            hooks: Notified right before the storage write.
            base_uri: Public base URI for remote disks.
            clock: Returns the time directory templates are expanded with.
        """
        self._policy = policy
        self._file = file
        self._store = store
        self._url_resolver = url_resolver
        self._hooks = tuple(hooks)
        self._base_uri = base_uri
        self._clock = clock
        self._validator = FileValidator(policy.allowed_mimes, policy.max_bytes)
        self._state = UploadState.RECEIVED

    @property
    def policy(self) -> Policy:
        """Get the policy this upload runs under."""
        return self._policy

    @property
    def name(self) -> str:
        """Get the strategy name."""
        return self._policy.name

    @property
    def disk(self) -> str:
        """Get the storage backend id."""
        return self._policy.backend_id

    @property
    def mimes(self) -> frozenset[str]:
        """Get allowed MIME types."""
        return self._policy.allowed_mimes

    @property
    def max_size(self) -> int:
        """Get size limit in bytes, 0 for unlimited."""
        return self._policy.max_bytes

    @property
    def directory(self) -> str:
        """Get the unexpanded directory template."""
        return self._policy.directory_template

    @property
    def file(self) -> IncomingFile:
        """Get the uploaded file."""
        return self._file

    @property
    def filename(self) -> str:
        """Generate the stored filename.

        Random naming yields a new name on every access.
        """
        return generate_filename(self._policy.naming_mode, self._file)

    @property
    def state(self) -> UploadState:
        """Get the current state of the upload."""
        return self._state

    def build_path(self, filename: str) -> str:
        """Build the storage path for a filename.

        Args:
            filename: Stored filename.

        Returns:
            Expanded directory joined with filename, without leading slash.
        """
        now = self._clock() if self._clock else None
        directory = format_directory(self._policy.directory_template, now)
        path = '{0}/{1}'.format(directory.rstrip('/'), filename)
        return path.lstrip('/')

    def upload(self, options: Mapping[str, Any] | None = None) -> UploadOutcome:
        """Validate and store the file.

        Args:
            options: Write options passed to the object store.

        Returns:
            UploadSucceeded, or UploadFailed if the store did not persist
            the file.

        Raises:
            UploadValidationError: If the file violates the policy.
            RuntimeError: If this strategy already ran.
        """
        if self._state is not UploadState.RECEIVED:
            raise RuntimeError(f'Upload already ran: {self._state.value}')

        try:
            self._validator.validate(self._file)
        except UploadValidationError:
            self._state = UploadState.REJECTED
            raise
        self._state = UploadState.VALIDATED

        path = self.build_path(self.filename)
        with self._file.open() as stream:
            for hook in self._hooks:
                hook.before_upload(self._file)
            logger.info('Storing upload on disk %s: %s', self.disk, path)
            stored = self._store.put(path, stream, self.disk, options or {})
        self._state = UploadState.STORED

        if stored:
            outcome: UploadOutcome = UploadSucceeded(self._build_response(path))
            logger.info('Stored upload: %s', path)
        else:
            outcome = UploadFailed(self._build_failed_response(path))
            logger.warning(
                'Disk %s did not store upload: %s',
                self.disk,
                path,
            )

        self._state = UploadState.COMPLETED
        return outcome

    def _build_response(self, path: str) -> Response:
        urls = self._url_resolver.resolve(path, self.disk, self._base_uri)
        return Response(
            path=path,
            disk=self.disk,
            mime=self._file.mime_type,
            size=self._file.size,
            filename=PurePosixPath(path).name,
            extension=self._file.extension,
            original_name=self._file.original_name,
            strategy=self.name,
            url=urls.absolute_url,
            relative_url=urls.relative_url,
        )

    def _build_failed_response(self, path: str) -> Response:
        return Response(
            path='',
            disk=self.disk,
            mime=self._file.mime_type,
            size=self._file.size,
            filename=PurePosixPath(path).name,
            extension=self._file.extension,
            original_name=self._file.original_name,
            strategy=self.name,
            url='',
            relative_url='',
        )


@final
class StrategyFactory:
    """Creates strategies sharing the same collaborators."""

    def __init__(  # noqa: WPS211
        self,
        store: ObjectStore,
        url_resolver: UrlResolver,
        hooks: Sequence[EventHook] = (),
        base_uri: str = '',
        clock: Clock | None = None,
    ) -> None:
        """Initialize factory.

        Args:
            store: Object store files are written to.
            url_resolver: Builds URLs of stored files.
            hooks: Notified right before each storage write.
            base_uri: Public base URI for remote disks.
            clock: Returns the time directory templates are expanded with.
        """
        self._store = store
        self._url_resolver = url_resolver
        self._hooks = tuple(hooks)
        self._base_uri = base_uri
        self._clock = clock

    def create(self, policy: Policy, file: IncomingFile) -> Strategy:
        """Create a strategy for one file.

        Args:
            policy: Resolved upload policy.
            file: Uploaded file.

        Returns:
            Strategy ready to upload.
        """
        return Strategy(
            policy,
            file,
            store=self._store,
            url_resolver=self._url_resolver,
            hooks=self._hooks,
            base_uri=self._base_uri,
            clock=self._clock,
        )


@final
class StrategyResolver:
    """Builds the strategy for an upload request."""

    def __init__(
        self,
        policy_resolver: PolicyResolver,
        factory: StrategyFactory,
    ) -> None:
        """Initialize resolver.

        Args:
            policy_resolver: Resolves strategy names to policies.
            factory: Creates strategies.
        """
        self._policy_resolver = policy_resolver
        self._factory = factory

    @classmethod
    def from_settings(cls) -> 'StrategyResolver':
        """Create a resolver wired from Django settings.

        Uses ``settings.UPLOADER`` for policies and URLs and
        ``settings.STORAGES`` for disks.

        Returns:
            StrategyResolver instance.
        """
        uploader = getattr(settings, 'UPLOADER', {})
        store = DjangoObjectStore()
        factory = StrategyFactory(
            store=store,
            url_resolver=UrlResolver(store, uploader.get('app_url', '')),
            hooks=[SignalEventHook(sender=Strategy)],
            base_uri=uploader.get('base_uri') or '',
        )
        return cls(PolicyResolver(SettingsPolicyStore()), factory)

    def resolve_from_request(
        self,
        request: HttpRequest,
        name: str | None = None,
    ) -> Strategy:
        """Resolve the strategy for the file in a request.

        Args:
            request: Multipart request carrying the file.
            name: Strategy name, None for the default one.

        Returns:
            Strategy for the uploaded file.

        Raises:
            MissingFileError: If the policy's form field holds no file.
            ImproperlyConfigured: If the strategy settings are invalid.
        """
        policy = self._policy_resolver.resolve(name)

        uploaded_file = request.FILES.get(policy.form_field_name)
        if uploaded_file is None:
            logger.warning(
                'No file in form field %s for strategy %s',
                policy.form_field_name,
                policy.name,
            )
            raise MissingFileError(policy.form_field_name)

        return self._factory.create(policy, IncomingFile(uploaded_file))
