from dataclasses import dataclass, field

from airlock.mapping.models import MappingEntry


@dataclass
class AnonymizationResult:
    """Output of one anonymize call."""

    anonymized_text: str
    new_entries: list[MappingEntry] = field(default_factory=list)
