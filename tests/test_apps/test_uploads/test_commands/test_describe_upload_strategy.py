"""Tests for describe_upload_strategy management command."""

import json
from io import StringIO

import pytest
from django.core.management import CommandError, call_command


@pytest.fixture
def strategies(settings):
    """Configure a default and an avatar strategy.

    Returns:
        Django settings with UPLOADER strategies.
    """
    settings.UPLOADER = {
        'strategies': {
            'default': {
                'disk': 'default',
                'mimes': ['*'],
                'directory': 'uploads/{Y}',
                'max_size': '2M',
            },
            'avatar': {
                'mimes': ['image/png', 'image/jpeg'],
                'max_size': '1M',
            },
        },
    }
    return settings


class TestDescribeUploadStrategyCommand:
    """Tests for describe_upload_strategy management command."""

    def test_describes_default(self, strategies):
        """Test the default strategy is shown without arguments."""
        out = StringIO()
        call_command('describe_upload_strategy', stdout=out)

        policy = json.loads(out.getvalue())
        assert policy == {
            'name': 'default',
            'disk': 'default',
            'mimes': ['*'],
            'max_bytes': 2 * 1024 * 1024,
            'directory': 'uploads/{Y}',
            'filename_type': 'md5_file',
            'form_field': 'file',
        }

    def test_describes_named_strategy(self, strategies):
        """Test named strategies are merged over the default."""
        out = StringIO()
        call_command('describe_upload_strategy', 'avatar', stdout=out)

        policy = json.loads(out.getvalue())
        assert policy['name'] == 'avatar'
        assert policy['mimes'] == ['image/jpeg', 'image/png']
        assert policy['max_bytes'] == 1024 * 1024
        assert policy['directory'] == 'uploads/{Y}'

    def test_raw_record(self, strategies):
        """Test --raw prints the merged settings record."""
        out = StringIO()
        call_command('describe_upload_strategy', 'avatar', raw=True, stdout=out)

        record = json.loads(out.getvalue())
        assert record == {
            'disk': 'default',
            'mimes': ['image/png', 'image/jpeg'],
            'directory': 'uploads/{Y}',
            'max_size': '1M',
        }

    def test_invalid_strategy_fails(self, strategies):
        """Test invalid strategy settings are reported as command errors."""
        strategies.UPLOADER['strategies']['broken'] = {
            'filename_type': 'sha1',
        }

        with pytest.raises(CommandError, match='unknown filename_type'):
            call_command('describe_upload_strategy', 'broken')
