import re
from dataclasses import dataclass, field
from enum import Enum


class PIIType(str, Enum):
    """Closed set of detected PII categories.

    The value doubles as the tag inside a placeholder, e.g. ``[NAME_001]``.
    """

    NAME = "NAME"
    PHONE = "PHONE"
    EMAIL = "EMAIL"
    ADDRESS = "ADDRESS"
    MYNUMBER = "MYNUMBER"  # individual number (national id)
    DOB = "DOB"


@dataclass(frozen=True)
class PatternSpec:
    """Immutable regex template; compile a fresh matcher per use."""

    source: str
    flags: int = 0

    def compile(self) -> re.Pattern[str]:
        return re.compile(self.source, self.flags)


@dataclass
class PatternRule:
    """Prioritized set of expressions for one PII category."""

    type: PIIType
    patterns: list[PatternSpec]
    enabled: bool = True
    priority: int = 100  # lower value is matched first
    context_required: bool = False

    def clone(self) -> "PatternRule":
        return PatternRule(
            type=self.type,
            patterns=list(self.patterns),
            enabled=self.enabled,
            priority=self.priority,
            context_required=self.context_required,
        )

    @property
    def needs_context(self) -> bool:
        """True when matches are only accepted behind the context gate."""
        return not self.enabled and self.context_required


@dataclass(frozen=True)
class Match:
    """A detected PII span; ``end`` is exclusive."""

    type: PIIType
    value: str
    start: int
    end: int


@dataclass(frozen=True)
class DetectionSummary:
    """Counts of detected values for a text, without rewriting it."""

    total: int
    by_type: dict[PIIType, int] = field(default_factory=dict)
