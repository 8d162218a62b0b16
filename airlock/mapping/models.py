import re
import time
from dataclasses import dataclass, field

from airlock.detection.models import PIIType

_NAME_SPACING_RE = re.compile(r"[\s　]+")


def normalize_for_lookup(value: str, pii_type: PIIType) -> str:
    """Reverse-index key variant; names are compared without spacing."""
    if pii_type == PIIType.NAME:
        return _NAME_SPACING_RE.sub("", value)
    return value


@dataclass(frozen=True)
class MappingEntry:
    """Single placeholder ↔ original value record."""

    placeholder: str  # e.g. "[NAME_001]"
    original: str
    type: PIIType
    document_uri: str  # file the value was first seen in
    created_at: float = field(default_factory=time.time)


@dataclass(frozen=True)
class MappingStats:
    total: int
    by_type: dict[PIIType, int]


@dataclass
class SessionMapping:
    """Bidirectional placeholder store with per-category counters.

    ``counters`` hold the highest number minted per category and never go
    down, not even when entries are removed, so a placeholder number is
    never handed out twice.

    Not thread-safe: callers sharing one mapping across files must
    serialize anonymization calls themselves.
    """

    entries: dict[str, MappingEntry] = field(default_factory=dict)
    reverse_index: dict[str, str] = field(default_factory=dict)
    counters: dict[PIIType, int] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Placeholder allocation
    # ------------------------------------------------------------------

    def lookup(self, value: str, pii_type: PIIType) -> str | None:
        """Existing placeholder for *value* (raw key first, then normalized)."""
        placeholder = self.reverse_index.get(value)
        if placeholder is None:
            placeholder = self.reverse_index.get(normalize_for_lookup(value, pii_type))
        return placeholder

    def next_number(self, pii_type: PIIType) -> int:
        number = self.counters.get(pii_type, 0) + 1
        self.counters[pii_type] = number
        return number

    def bump_counter(self, pii_type: PIIType, number: int) -> None:
        if number > self.counters.get(pii_type, 0):
            self.counters[pii_type] = number

    def register(self, entry: MappingEntry) -> None:
        """Store *entry* and index its original (plus the name alias)."""
        self.entries[entry.placeholder] = entry
        self.reverse_index[entry.original] = entry.placeholder
        normalized = normalize_for_lookup(entry.original, entry.type)
        if normalized != entry.original:
            self.reverse_index[normalized] = entry.placeholder

    def add_entries(self, entries: list[MappingEntry]) -> None:
        for entry in entries:
            self.register(entry)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_entry(self, placeholder: str) -> MappingEntry | None:
        return self.entries.get(placeholder)

    def get_placeholder(self, original: str) -> str | None:
        return self.reverse_index.get(original)

    def all_entries(self) -> list[MappingEntry]:
        return list(self.entries.values())

    def entries_by_type(self, pii_type: PIIType) -> list[MappingEntry]:
        return [e for e in self.entries.values() if e.type == pii_type]

    def entries_by_document(self, document_uri: str) -> list[MappingEntry]:
        return [e for e in self.entries.values() if e.document_uri == document_uri]

    def stats(self) -> MappingStats:
        by_type = {pii_type: 0 for pii_type in PIIType}
        for entry in self.entries.values():
            by_type[entry.type] += 1
        return MappingStats(total=len(self.entries), by_type=by_type)

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove_entry(self, placeholder: str) -> bool:
        """Drop one entry and every reverse key pointing at it."""
        if self.entries.pop(placeholder, None) is None:
            return False
        stale = [key for key, value in self.reverse_index.items() if value == placeholder]
        for key in stale:
            del self.reverse_index[key]
        return True

    def clear(self) -> None:
        self.entries.clear()
        self.reverse_index.clear()
        self.counters.clear()

    def is_empty(self) -> bool:
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)
