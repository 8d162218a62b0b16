"""Pattern-based PII detection.

Processing flow:
1. Build the birth-date context index (delimited-table header scan).
2. Walk the rules in priority order, scanning every expression left to right.
3. Gate context-required rules, drop excluded name tokens, and keep the
   first accepted match for any overlapping span.
4. Pick up short name values behind well-known YAML name keys.
5. Return matches sorted by start offset.
"""

import bisect
import re
from collections.abc import Iterable

from airlock.detection.models import DetectionSummary, Match, PatternRule, PIIType
from airlock.logging.logger import Log

DOB_CONTEXT_KEYWORDS: tuple[str, ...] = (
    "生年月日",
    "誕生日",
    "生まれ",
    "出生日",
    "DOB",
    "dob",
    "birthday",
    "birthdate",
    "birth_date",
    "date_of_birth",
    "dateOfBirth",
)

# Header labels, departments and status words that look like names.
NAME_EXCLUSION_WORDS: frozenset[str] = frozenset(
    {
        "生年月日", "誕生日", "電話番号", "住所", "氏名", "名前", "担当者",
        "作成日", "更新日", "登録日", "開始日", "終了日", "有効期限",
        "部署名", "所属", "職種", "役職", "確定", "未確定", "仮確定",
        "診断科", "診療科", "放射線", "内科", "外科", "整形外科",
        "小児科", "産婦人科", "皮膚科", "眼科", "耳鼻科", "泌尿器科",
        "精神科", "心療内科", "救急科", "麻酔科", "病理診断",
        "当直", "日付", "時刻", "備考", "連絡先", "緊急連絡",
        "予定", "実績", "状態", "種別", "区分", "分類",
        "マイナンバー", "個人番号", "コメント",
    }
)

# YAML keys whose values are likely to be (short) personal names.
YAML_NAME_KEYS: tuple[str, ...] = (
    "name", "display_name", "short_name", "full_name",
    "氏名", "名前", "担当者", "姓", "名",
)

_VALUE_TERMINATOR = r"[\"']?\s*(?:#|$|\n|,|\})"
_KANJI_VALUE = r"([一-龯]{2,4})"
_KATAKANA_VALUE = r"([ァ-ヶー]{2,6})"
_QUOTE_EDGES_RE = re.compile(r'^["「『]|["」』]$')


def _build_yaml_name_patterns() -> list[re.Pattern[str]]:
    patterns: list[re.Pattern[str]] = []
    for key in YAML_NAME_KEYS:
        for value in (_KANJI_VALUE, _KATAKANA_VALUE):
            patterns.append(
                re.compile(
                    re.escape(key) + r":\s*[\"']?" + value + _VALUE_TERMINATOR,
                    re.IGNORECASE,
                )
            )
    return patterns


class _LineIndex:
    """Maps text offsets to line numbers and line contents."""

    def __init__(self, text: str) -> None:
        self._lines = text.split("\n")
        self._starts: list[int] = []
        offset = 0
        for line in self._lines:
            self._starts.append(offset)
            offset += len(line) + 1

    @property
    def lines(self) -> list[str]:
        return self._lines

    def line_number(self, position: int) -> int:
        return bisect.bisect_right(self._starts, position) - 1

    def line_at(self, position: int) -> str:
        return self._lines[self.line_number(position)]


class PIIDetector:
    """Detects PII spans with priority, overlap and context resolution.

    The detector keeps rules, never compiled matchers: every call compiles
    fresh expressions from the rules' pattern specs, so no scan position is
    shared between calls.
    """

    def __init__(self, patterns: Iterable[PatternRule]) -> None:
        self._patterns = [rule.clone() for rule in patterns]

    def update_patterns(self, patterns: Iterable[PatternRule]) -> None:
        self._patterns = [rule.clone() for rule in patterns]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def detect(self, text: str) -> list[Match]:
        """Return non-overlapping PII matches sorted by start offset."""
        if not text:
            return []

        line_index = _LineIndex(text)
        context_lines = self._analyze_dob_context(line_index.lines)

        matches: list[Match] = []
        active = sorted(
            (rule for rule in self._patterns if rule.enabled or rule.context_required),
            key=lambda r: r.priority,
        )
        for rule in active:
            for spec in rule.patterns:
                for m in spec.compile().finditer(text):
                    value = m.group(0)
                    if not value:
                        continue
                    start, end = m.start(), m.end()

                    if rule.needs_context and not self._has_dob_context(
                        start, line_index, context_lines
                    ):
                        continue
                    if rule.type == PIIType.NAME and self._is_excluded_name(value):
                        continue
                    if self._overlaps(matches, start, end):
                        continue
                    matches.append(Match(rule.type, value, start, end))

        if any(rule.type == PIIType.NAME and rule.enabled for rule in self._patterns):
            matches.extend(self._detect_yaml_name_fields(text, matches))

        matches.sort(key=lambda m: m.start)
        Log.debug(f"Detected {len(matches)} PII matches in {len(text)} chars")
        return matches

    def detect_by_type(self, text: str, pii_type: PIIType) -> list[Match]:
        """Detect using only the enabled rules of one category."""
        rules = [r for r in self._patterns if r.type == pii_type and r.enabled]
        return PIIDetector(rules).detect(text)

    def contains_pii(self, text: str) -> bool:
        """Cheap yes/no check over unconditionally enabled rules."""
        for rule in self._patterns:
            if not rule.enabled:
                continue
            for spec in rule.patterns:
                if spec.compile().search(text):
                    return True
        return False

    def summarize(self, text: str) -> DetectionSummary:
        matches = self.detect(text)
        by_type = {pii_type: 0 for pii_type in PIIType}
        for m in matches:
            by_type[m.type] += 1
        return DetectionSummary(total=len(matches), by_type=by_type)

    # ------------------------------------------------------------------
    # Secondary pass: short names behind YAML name keys
    # ------------------------------------------------------------------

    def _detect_yaml_name_fields(
        self,
        text: str,
        existing: list[Match],
    ) -> list[Match]:
        additional: list[Match] = []
        for pattern in _build_yaml_name_patterns():
            for m in pattern.finditer(text):
                value = m.group(1)
                start, end = m.start(1), m.end(1)
                if self._is_excluded_name(value):
                    continue
                if self._overlaps(existing, start, end) or self._overlaps(
                    additional, start, end
                ):
                    continue
                additional.append(Match(PIIType.NAME, value, start, end))
        return additional

    # ------------------------------------------------------------------
    # Context gate
    # ------------------------------------------------------------------

    @staticmethod
    def _analyze_dob_context(lines: list[str]) -> set[int]:
        """Mark every line when a delimited header names a birth-date column."""
        header = lines[0]
        if "," in header:
            delimiter = ","
        elif "\t" in header:
            delimiter = "\t"
        else:
            return set()

        for cell in header.split(delimiter):
            if _contains_dob_keyword(cell.strip()):
                return set(range(len(lines)))
        return set()

    @staticmethod
    def _has_dob_context(
        position: int,
        line_index: _LineIndex,
        context_lines: set[int],
    ) -> bool:
        if line_index.line_number(position) in context_lines:
            return True
        return _contains_dob_keyword(line_index.line_at(position))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _is_excluded_name(value: str) -> bool:
        normalized = _QUOTE_EDGES_RE.sub("", value.strip())
        return normalized in NAME_EXCLUSION_WORDS

    @staticmethod
    def _overlaps(matches: list[Match], start: int, end: int) -> bool:
        return any(not (end <= m.start or start >= m.end) for m in matches)


def _contains_dob_keyword(text: str) -> bool:
    lowered = text.lower()
    return any(keyword.lower() in lowered for keyword in DOB_CONTEXT_KEYWORDS)
