"""Keep anonymized YAML parseable.

A plain YAML scalar that starts with ``[`` opens a flow sequence, so
``name: [NAME_001]`` would load as a list and ``name: [NAME_001]（外科）``
would not load at all. This pass double-quotes every scalar whose content
starts with a placeholder:

    担当者: [NAME_001]（放射線診断）   ->  担当者: "[NAME_001]（放射線診断）"
    names: [[NAME_001], [NAME_002]]  ->  names: ["[NAME_001]", "[NAME_002]"]

Placeholders in the middle of a value, inside quoted scalars, inside block
scalars (``|`` / ``>``) and in comments are left alone. The scanner only
understands the subset of YAML needed to find scalar boundaries; a line it
cannot place is emitted unchanged.
"""

import re
from dataclasses import dataclass

from airlock.mapping.placeholders import PLACEHOLDER_RE, contains_placeholder

_BLOCK_HEADER_RE = re.compile(r"^(?P<indent>\s*)(?:-\s+)?[^#]*:\s*[|>][0-9+-]*\s*(?:#.*)?$")
_LIST_BLOCK_HEADER_RE = re.compile(r"^(?P<indent>\s*)-\s*[|>][0-9+-]*\s*(?:#.*)?$")

_OPENERS = {"]": "[", "}": "{"}


class _QuoteState:
    """Tracks single/double quoted regions one character at a time."""

    def __init__(self) -> None:
        self.in_single = False
        self.in_double = False
        self._single_escaped = False
        self._double_escaped = False

    @property
    def quoted(self) -> bool:
        return self.in_single or self.in_double

    def step(self, ch: str, next_ch: str) -> bool:
        """Advance over *ch*; True when it is quoted text or a quote mark."""
        if self.in_single:
            if ch == "'":
                if self._single_escaped:
                    self._single_escaped = False
                elif next_ch == "'":
                    self._single_escaped = True
                else:
                    self.in_single = False
            return True

        if self.in_double:
            if self._double_escaped:
                self._double_escaped = False
            elif ch == "\\":
                self._double_escaped = True
            elif ch == '"':
                self.in_double = False
            return True

        if ch == "'":
            self.in_single = True
            self._single_escaped = False
            return True
        if ch == '"':
            self.in_double = True
            self._double_escaped = False
            return True
        return False


@dataclass
class _LineScan:
    """Per-character state of one line, taken before the character is read."""

    code: str
    quoted: list[bool]
    depth: list[int]
    top: list[str | None]

    @classmethod
    def of(cls, code: str) -> "_LineScan":
        size = len(code)
        quoted = [False] * size
        depth = [0] * size
        top: list[str | None] = [None] * size

        state = _QuoteState()
        stack: list[str] = []
        for i, ch in enumerate(code):
            quoted[i] = state.quoted
            depth[i] = len(stack)
            top[i] = stack[-1] if stack else None

            next_ch = code[i + 1] if i + 1 < size else ""
            if state.step(ch, next_ch):
                continue
            if ch in "[{":
                stack.append(ch)
            elif ch in "]}":
                if stack and stack[-1] == _OPENERS[ch]:
                    stack.pop()

        return cls(code=code, quoted=quoted, depth=depth, top=top)

    def skip_spaces(self, index: int) -> int:
        while index < len(self.code) and self.code[index].isspace():
            index += 1
        return index

    def block_content_start(self) -> int:
        """Start of the line's content after indentation and a ``- `` marker."""
        code = self.code
        index = self.skip_spaces(0)
        if index < len(code) and code[index] == "-" and (
            index + 1 >= len(code) or code[index + 1].isspace()
        ):
            index = self.skip_spaces(index + 1)
        return index

    def block_mapping_separator(self, start: int) -> int:
        """Index of the first top-level ``key: value`` colon, or -1."""
        code = self.code
        for i in range(start, len(code)):
            if self.quoted[i] or self.depth[i] != 0:
                continue
            if code[i] == ":" and (i + 1 >= len(code) or code[i + 1].isspace()):
                return i
        return -1

    def flow_scalar_start(self, pos: int, depth: int, container: str | None) -> int:
        code = self.code
        for i in range(pos - 1, -1, -1):
            if self.quoted[i]:
                continue
            ch = code[i]
            if ch == "," and self.depth[i] == depth:
                return self.skip_spaces(i + 1)
            if ch in "[{" and self.depth[i] == depth - 1:
                return self.skip_spaces(i + 1)
            if container == "{" and ch == ":" and self.depth[i] == depth:
                return self.skip_spaces(i + 1)
        return 0

    def flow_scalar_end(self, pos: int, depth: int, container: str | None) -> int:
        code = self.code
        for i in range(pos, len(code)):
            if self.quoted[i]:
                continue
            ch = code[i]
            if ch in ",]}" and self.depth[i] == depth:
                return i
            if container == "{" and ch == ":" and self.depth[i] == depth:
                return i
        return len(code)


def quote_leading_placeholders(text: str) -> str:
    """Double-quote YAML scalars that begin with a placeholder."""
    out: list[str] = []
    in_block_scalar = False
    block_indent = 0

    for line in text.split("\n"):
        if in_block_scalar:
            if not line.strip():
                out.append(line)
                continue
            if _indent_of(line) >= block_indent:
                out.append(line)
                continue
            in_block_scalar = False

        if line.lstrip().startswith("#"):
            out.append(line)
            continue

        header = _BLOCK_HEADER_RE.match(line) or _LIST_BLOCK_HEADER_RE.match(line)
        if header:
            in_block_scalar = True
            block_indent = len(header.group("indent")) + 1
            out.append(line)
            continue

        if not contains_placeholder(line):
            out.append(line)
            continue

        code, comment = split_comment(line)
        out.append(_quote_scalars(code) + comment)

    return "\n".join(out)


def split_comment(line: str) -> tuple[str, str]:
    """Split *line* into code and an inline ``# comment`` outside quotes."""
    state = _QuoteState()
    for i, ch in enumerate(line):
        next_ch = line[i + 1] if i + 1 < len(line) else ""
        if state.step(ch, next_ch):
            continue
        if ch == "#" and (i == 0 or line[i - 1].isspace()):
            return line[:i], line[i:]
    return line, ""


def _quote_scalars(code: str) -> str:
    if not contains_placeholder(code):
        return code

    scan = _LineScan.of(code)
    size = len(code)
    ranges: set[tuple[int, int]] = set()

    for m in PLACEHOLDER_RE.finditer(code):
        start, end = m.start(), m.end()
        if scan.quoted[start]:
            continue

        depth = scan.depth[start]
        container = scan.top[start]

        if depth > 0:
            scalar_start = scan.flow_scalar_start(start, depth, container)
            if scalar_start != start:
                continue
            scalar_end = scan.flow_scalar_end(end, depth, container)
        else:
            content_start = scan.block_content_start()
            colon = scan.block_mapping_separator(content_start)
            if colon != -1 and start > colon:
                scalar_start = scan.skip_spaces(colon + 1)
                scalar_end = size
            elif colon != -1:
                scalar_start = content_start
                scalar_end = colon
            else:
                scalar_start = content_start
                scalar_end = size
            if scalar_start != start:
                continue

        if scalar_start < size and code[scalar_start] in "\"'":
            continue

        trimmed_end = scalar_end
        while trimmed_end > scalar_start and code[trimmed_end - 1].isspace():
            trimmed_end -= 1
        ranges.add((scalar_start, trimmed_end))

    updated = code
    for start, end in sorted(ranges, key=lambda r: r[0], reverse=True):
        updated = updated[:start] + _double_quote(updated[start:end]) + updated[end:]
    return updated


def _double_quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())
