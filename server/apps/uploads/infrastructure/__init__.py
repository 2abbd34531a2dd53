"""Infrastructure layer for uploads app.

This package contains integrations with external systems:
- Storage backends resolved from ``STORAGES`` (local disk, S3/MinIO/R2)
- Adapter over Django's uploaded files
- Policy records read from settings

Keep infrastructure concerns separate from business logic.
"""
