"""In-memory directory of metadata entries.

The directory is owned by the running session and handed read-only to the
condition model when it resolves select-widget options.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from shaper.core.ids import generate_id
from shaper.metadata.models import (
    DEFAULT_METADATA,
    DuplicateMetadataValueError,
    MetadataCategory,
    MetadataEntry,
    MetadataError,
)

logger = logging.getLogger(__name__)


class MetadataDirectory:
    """Ordered collection of metadata entries across all categories.

    Entries keep insertion order. Values are unique within a category;
    :meth:`add` rejects duplicates so select widgets can identify options by
    value alone.
    """

    def __init__(self, entries: Iterable[MetadataEntry] = ()) -> None:
        self._entries: list[MetadataEntry] = []
        for entry in entries:
            self._check_unique(entry.category, entry.value)
            self._entries.append(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> list[MetadataEntry]:
        """Return all entries in insertion order."""
        return list(self._entries)

    def for_category(self, category: MetadataCategory) -> list[MetadataEntry]:
        """Return the entries belonging to one category."""
        return [e for e in self._entries if e.category is category]

    def options(self, category: MetadataCategory) -> list[tuple[str, str]]:
        """Return ``(value, label)`` pairs for a category's select widget."""
        return [(e.value, e.label) for e in self.for_category(category)]

    def contains_value(self, category: MetadataCategory, value: str) -> bool:
        """Check whether a value token exists within a category."""
        return any(e.value == value for e in self.for_category(category))

    def label_for(self, category: MetadataCategory, value: str) -> str:
        """Look up the display label for a value, falling back to the value."""
        for entry in self.for_category(category):
            if entry.value == value:
                return entry.label
        return value

    def search(self, category: MetadataCategory, term: str) -> list[MetadataEntry]:
        """Filter a category by case-insensitive substring on label or value.

        An empty term matches every entry of the category.
        """
        needle = term.casefold()
        return [
            e
            for e in self.for_category(category)
            if needle in e.label.casefold() or needle in e.value.casefold()
        ]

    def add(self, category: MetadataCategory, label: str, value: str) -> MetadataEntry:
        """Append a new entry with a freshly generated id.

        Args:
            category: Category the entry belongs to.
            label: Display label (required).
            value: Token compared against traffic attributes (required).

        Returns:
            The created entry.

        Raises:
            MetadataError: If label or value is blank.
            DuplicateMetadataValueError: If the value already exists in the
                category.
        """
        if not label.strip() or not value.strip():
            raise MetadataError("Metadata entries require both a label and a value")
        self._check_unique(category, value)

        entry = MetadataEntry(
            id=generate_id(category.value),
            category=category,
            label=label,
            value=value,
        )
        self._entries.append(entry)
        logger.info(
            "Metadata entry added",
            extra={"category": category.value, "value": value},
        )
        return entry

    def remove(self, entry_id: str) -> bool:
        """Remove an entry by id.

        Returns:
            True if an entry was removed, False if the id was unknown.
        """
        for idx, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[idx]
                logger.info(
                    "Metadata entry removed",
                    extra={"category": entry.category.value, "value": entry.value},
                )
                return True
        return False

    def _check_unique(self, category: MetadataCategory, value: str) -> None:
        if self.contains_value(category, value):
            raise DuplicateMetadataValueError(category, value)


def default_directory(extra: Iterable[MetadataEntry] = ()) -> MetadataDirectory:
    """Build a directory seeded with the default entries.

    Args:
        extra: Additional entries (typically from configuration) appended
            after the defaults.

    Returns:
        A new, independent directory.
    """
    return MetadataDirectory([*DEFAULT_METADATA, *extra])
