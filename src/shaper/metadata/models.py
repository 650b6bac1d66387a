"""Metadata entry types.

Metadata entries are labeled value tokens grouped by segment category.
The value is what gets compared against live traffic attributes; the
label is display-only.
"""

from dataclasses import dataclass
from enum import Enum


class MetadataCategory(Enum):
    """Segment categories that bounded-category match fields draw from."""

    USER = "user"
    CLIENT = "client"
    REALTIME = "realtime"
    OFFLINE = "offline"

    @property
    def label(self) -> str:
        """Display label for the category."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    MetadataCategory.USER: "User Type",
    MetadataCategory.CLIENT: "Client",
    MetadataCategory.REALTIME: "Real-time Tag",
    MetadataCategory.OFFLINE: "Offline Tag",
}


@dataclass(frozen=True)
class MetadataEntry:
    """A single labeled token within a category."""

    id: str
    category: MetadataCategory
    label: str
    value: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "category": self.category.value,
            "label": self.label,
            "value": self.value,
        }


class MetadataError(Exception):
    """Base class for metadata directory errors."""

    pass


class DuplicateMetadataValueError(MetadataError):
    """Raised when a value token already exists within its category.

    Single and multi-select widgets identify options by value, so two
    entries sharing a value would be indistinguishable once selected.
    """

    def __init__(self, category: MetadataCategory, value: str) -> None:
        self.category = category
        self.value = value
        super().__init__(
            f"Value '{value}' already exists in category '{category.value}'"
        )


# Seed entries available before any operator edits.
DEFAULT_METADATA: tuple[MetadataEntry, ...] = (
    MetadataEntry("rt1", MetadataCategory.REALTIME, "High Bandwidth Usage", "high_bw_usage"),
    MetadataEntry("rt2", MetadataCategory.REALTIME, "New Device", "new_device"),
    MetadataEntry("ot1", MetadataCategory.OFFLINE, "Churn Risk: High", "churn_high"),
    MetadataEntry("ot2", MetadataCategory.OFFLINE, "Loyal Customer", "loyal_cust"),
    MetadataEntry("ot3", MetadataCategory.OFFLINE, "Edu Network", "edu_net"),
    MetadataEntry("u0", MetadataCategory.USER, "Guest (not signed in)", "0"),
    MetadataEntry("u1", MetadataCategory.USER, "Regular User", "1"),
    MetadataEntry("u2", MetadataCategory.USER, "Veteran User", "2"),
    MetadataEntry("u3", MetadataCategory.USER, "Platinum Member", "3"),
    MetadataEntry("u4", MetadataCategory.USER, "Super Member", "4"),
    MetadataEntry("u5", MetadataCategory.USER, "Negative Margin User", "5"),
    MetadataEntry("c1", MetadataCategory.CLIENT, "Android", "android"),
    MetadataEntry("c2", MetadataCategory.CLIENT, "iOS", "ios"),
    MetadataEntry("c3", MetadataCategory.CLIENT, "PC", "pc"),
    MetadataEntry("c4", MetadataCategory.CLIENT, "Web", "web"),
)
