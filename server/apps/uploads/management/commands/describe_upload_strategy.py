"""Management command to show how an upload strategy resolves."""

import json
from typing import Any

from django.core.exceptions import ImproperlyConfigured
from django.core.management.base import BaseCommand, CommandError

from server.apps.uploads.infrastructure.policies import SettingsPolicyStore
from server.apps.uploads.logic.policies import DEFAULT_POLICY, PolicyResolver


class Command(BaseCommand):
    """Print the policy a strategy name resolves to."""

    help = 'Show the merged upload policy for a strategy'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            'strategy',
            nargs='?',
            default=DEFAULT_POLICY,
            help=f'Strategy name (default: {DEFAULT_POLICY})',
        )
        parser.add_argument(
            '--raw',
            action='store_true',
            help='Print the merged settings record instead of the policy',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If the strategy settings are invalid.
        """
        resolver = PolicyResolver(SettingsPolicyStore())
        name = options['strategy']

        if options['raw']:
            self.stdout.write(json.dumps(resolver.load(name), indent=2))
            return

        try:
            policy = resolver.resolve(name)
        except ImproperlyConfigured as error:
            raise CommandError(str(error)) from error

        self.stdout.write(json.dumps({
            'name': policy.name,
            'disk': policy.backend_id,
            'mimes': sorted(policy.allowed_mimes),
            'max_bytes': policy.max_bytes,
            'directory': policy.directory_template,
            'filename_type': policy.naming_mode.value,
            'form_field': policy.form_field_name,
        }, indent=2))
