"""Directory template expansion."""

from datetime import datetime

from django.utils import timezone


def format_directory(template: str, now: datetime | None = None) -> str:
    """Replace date placeholders in a directory template.

    Supported placeholders: {Y} year, {m} month, {d} day, {H} hour (24h),
    {i} minute, {s} second. All but the year are zero-padded to two
    digits. Anything else is left untouched.

    Args:
        template: Directory template (e.g., 'avatars/{Y}/{m}').
        now: Moment to format, defaults to current local time.

    Returns:
        Expanded directory (e.g., 'avatars/2024/03').
    """
    if now is None:
        now = timezone.localtime()

    replacements = {
        '{Y}': f'{now.year:04d}',
        '{m}': f'{now.month:02d}',
        '{d}': f'{now.day:02d}',
        '{H}': f'{now.hour:02d}',
        '{i}': f'{now.minute:02d}',
        '{s}': f'{now.second:02d}',
    }

    directory = template
    for placeholder, value in replacements.items():
        directory = directory.replace(placeholder, value)
    return directory
