"""Metadata directory for segment categories.

Provides the labeled value tokens that populate condition value widgets:
- models: MetadataCategory, MetadataEntry, default seed entries
- directory: MetadataDirectory lookup and editing
"""

from shaper.metadata.directory import MetadataDirectory, default_directory
from shaper.metadata.models import (
    DEFAULT_METADATA,
    DuplicateMetadataValueError,
    MetadataCategory,
    MetadataEntry,
    MetadataError,
)

__all__ = [
    "DEFAULT_METADATA",
    "DuplicateMetadataValueError",
    "MetadataCategory",
    "MetadataDirectory",
    "MetadataEntry",
    "MetadataError",
    "default_directory",
]
