import re
from collections.abc import Iterable

from airlock.deanonymization.models import PlaceholderInfo
from airlock.mapping.models import SessionMapping
from airlock.mapping.placeholders import PLACEHOLDER_RE


class Deanonymizer:
    """Restores original values for placeholders found in text.

    Placeholders without a mapping entry are left exactly as they are, so
    text mixing restorable and foreign placeholders passes through safely.
    """

    def deanonymize(self, text: str, mapping: SessionMapping) -> str:
        def _sub(m: re.Match[str]) -> str:
            entry = mapping.get_entry(m.group(0))
            return entry.original if entry is not None else m.group(0)

        return PLACEHOLDER_RE.sub(_sub, text)

    def deanonymize_partial(
        self,
        text: str,
        mapping: SessionMapping,
        placeholders_to_restore: Iterable[str],
    ) -> str:
        """Restore only the placeholders listed in *placeholders_to_restore*."""
        restore_set = set(placeholders_to_restore)

        def _sub(m: re.Match[str]) -> str:
            placeholder = m.group(0)
            if placeholder not in restore_set:
                return placeholder
            entry = mapping.get_entry(placeholder)
            return entry.original if entry is not None else placeholder

        return PLACEHOLDER_RE.sub(_sub, text)

    def find_placeholders(self, text: str) -> list[PlaceholderInfo]:
        return [
            PlaceholderInfo(placeholder=m.group(0), start=m.start(), end=m.end())
            for m in PLACEHOLDER_RE.finditer(text)
        ]

    def contains_placeholders(self, text: str) -> bool:
        return PLACEHOLDER_RE.search(text) is not None

    def count_restorable_placeholders(self, text: str, mapping: SessionMapping) -> int:
        return sum(
            1
            for info in self.find_placeholders(text)
            if mapping.get_entry(info.placeholder) is not None
        )
