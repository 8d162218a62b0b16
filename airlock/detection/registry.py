"""Catalog of Japanese PII patterns.

Rules are ordered by ``priority``: lower values are tried first. Generic
shapes (personal names) carry the highest number so that specific formats
such as phone numbers claim their text before a broad pattern can.

Digits are written as ``[0-9]`` and word boundaries as explicit ASCII
lookarounds: Python's ``\\d`` and ``\\b`` are Unicode-aware and would treat
full-width digits and kana/kanji as word characters.
"""

from collections.abc import Iterable

from airlock.detection.models import PatternRule, PatternSpec, PIIType

_ASCII_WORD_BEFORE = r"(?<![0-9A-Za-z_])"
_ASCII_WORD_AFTER = r"(?![0-9A-Za-z_])"

# two-digit alternatives first so "15" is never cut to "1"
_MONTH = r"(1[0-2]|0?[1-9])"
_DAY = r"(3[01]|[12][0-9]|0?[1-9])"

DEFAULT_PATTERNS: tuple[PatternRule, ...] = (
    PatternRule(
        type=PIIType.PHONE,
        patterns=[
            # landline with hyphens: 03-1234-5678
            PatternSpec(r"0[0-9]{1,4}-[0-9]{1,4}-[0-9]{4}"),
            # mobile with hyphens: 090-1234-5678
            PatternSpec(r"0[789]0-[0-9]{4}-[0-9]{4}"),
            # without hyphens: 09012345678, 0312345678
            PatternSpec(r"0[0-9]{9,10}"),
        ],
        priority=10,
    ),
    PatternRule(
        type=PIIType.EMAIL,
        patterns=[
            PatternSpec(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
        ],
        priority=20,
    ),
    PatternRule(
        type=PIIType.MYNUMBER,
        patterns=[
            # 1234-5678-9012, 1234 5678 9012
            PatternSpec(
                _ASCII_WORD_BEFORE
                + r"[0-9]{4}[ -][0-9]{4}[ -][0-9]{4}"
                + _ASCII_WORD_AFTER
            ),
            PatternSpec(_ASCII_WORD_BEFORE + r"[0-9]{12}" + _ASCII_WORD_AFTER),
        ],
        priority=30,
    ),
    PatternRule(
        type=PIIType.DOB,
        patterns=[
            # 1990/01/15, 1990-01-15
            PatternSpec(
                r"(?<![0-9])(19|20)[0-9]{2}[/\-]" + _MONTH + r"[/\-]" + _DAY + r"(?![0-9])"
            ),
            # 1990年1月15日
            PatternSpec(r"(19|20)[0-9]{2}年" + _MONTH + "月" + _DAY + "日"),
            # 平成2年1月15日
            PatternSpec(
                r"(明治|大正|昭和|平成|令和)[0-9]{1,2}年" + _MONTH + "月" + _DAY + "日"
            ),
        ],
        priority=40,
    ),
    PatternRule(
        type=PIIType.ADDRESS,
        patterns=[
            # postal code: 〒123-4567, 123-4567
            PatternSpec(r"〒?[0-9]{3}-[0-9]{4}"),
            # address led by a prefecture
            PatternSpec(r"(東京都|北海道|(?:京都|大阪)府|[^\s]{2,3}県)[^\s,、。\n]{2,}"),
        ],
        priority=50,
    ),
    PatternRule(
        type=PIIType.NAME,
        patterns=[
            # surname and given name separated by a space: 山田 太郎, 佐藤　花子
            PatternSpec(r"[一-龯]{1,4}[\s　][一-龯]{1,4}"),
            # 4-6 contiguous kanji not glued to further kanji: 山田太郎
            PatternSpec(r"(?<![一-龯])([一-龯]{2,3})([一-龯]{2,3})(?![一-龯])"),
        ],
        priority=100,
    ),
)


class PatternRegistry:
    """Holds the rule set and toggles categories from configuration.

    Every accessor returns cloned rules so callers can never share mutable
    rule state with the registry.
    """

    def __init__(self, custom_patterns: Iterable[PatternRule] | None = None) -> None:
        source = DEFAULT_PATTERNS if custom_patterns is None else custom_patterns
        self._patterns: list[PatternRule] = [rule.clone() for rule in source]

    def active_patterns(self) -> list[PatternRule]:
        """Enabled rules plus context-gated ones, in priority order."""
        return self._sorted_clones(
            rule for rule in self._patterns if rule.enabled or rule.context_required
        )

    def enabled_patterns(self) -> list[PatternRule]:
        """Unconditionally enabled rules, in priority order."""
        return self._sorted_clones(rule for rule in self._patterns if rule.enabled)

    def all_patterns(self) -> list[PatternRule]:
        return [rule.clone() for rule in self._patterns]

    def set_enabled(self, pii_type: PIIType, enabled: bool) -> None:
        """Toggle a category; turning it off also drops its context gate."""
        for rule in self._rules_for(pii_type):
            rule.enabled = enabled
            if not enabled:
                rule.context_required = False

    def set_context_required(self, pii_type: PIIType, required: bool) -> None:
        for rule in self._rules_for(pii_type):
            rule.context_required = required

    def update_from_config(self, enabled_types: dict[PIIType, bool]) -> None:
        for pii_type, enabled in enabled_types.items():
            self.set_enabled(pii_type, enabled)

    def reset(self) -> None:
        self._patterns = [rule.clone() for rule in DEFAULT_PATTERNS]

    def _rules_for(self, pii_type: PIIType) -> list[PatternRule]:
        return [rule for rule in self._patterns if rule.type == pii_type]

    @staticmethod
    def _sorted_clones(rules: Iterable[PatternRule]) -> list[PatternRule]:
        return sorted((rule.clone() for rule in rules), key=lambda r: r.priority)
