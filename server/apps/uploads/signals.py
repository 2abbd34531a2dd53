"""Upload notifications.

``file_uploading`` is sent right before a validated file is written to
storage. Receivers get the ``IncomingFile`` as ``file``.
"""

import logging
from typing import TYPE_CHECKING, Protocol, final

from django.dispatch import Signal, receiver

if TYPE_CHECKING:
    from server.apps.uploads.infrastructure.incoming import IncomingFile

logger = logging.getLogger(__name__)

file_uploading = Signal()


class EventHook(Protocol):
    """Notified by the upload pipeline, return values are ignored."""

    def before_upload(self, file: 'IncomingFile') -> None:
        """Called once per upload, before the storage write."""


@final
class SignalEventHook:
    """Event hook that forwards notifications to Django signals."""

    def __init__(self, sender: type) -> None:
        """Initialize hook.

        Args:
            sender: Sender passed to signal receivers.
        """
        self._sender = sender

    def before_upload(self, file: 'IncomingFile') -> None:
        """Send ``file_uploading`` for the file.

        Args:
            file: File about to be stored.
        """
        file_uploading.send(sender=self._sender, file=file)


@receiver(file_uploading)
def log_file_uploading(
    sender: type,
    file: 'IncomingFile',
    **kwargs: object,
) -> None:
    """Log every file about to be stored.

    Args:
        sender: Class that sent the signal.
        file: File about to be stored.
        **kwargs: Additional signal arguments.
    """
    logger.info(
        'Uploading file: %s (%s, %d bytes)',
        file.original_name,
        file.mime_type,
        file.size,
    )
