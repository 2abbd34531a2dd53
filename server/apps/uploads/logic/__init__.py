"""Business logic layer for uploads app.

This package contains the upload strategy pipeline:
- Policy resolution and merging
- Validation of MIME type and size
- Directory and filename generation
- Storage dispatch and response/URL construction

Storage backends and request adapters live in ``infrastructure``.
"""
