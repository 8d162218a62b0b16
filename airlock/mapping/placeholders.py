"""Placeholder grammar shared by anonymization, restoration and storage.

A placeholder is ``[`` + category tag + ``_`` + three zero-padded digits +
``]``, for example ``[NAME_001]`` or ``[PHONE_012]``.
"""

import re

from airlock.detection.models import PIIType

_TAGS = "|".join(t.value for t in PIIType)

PLACEHOLDER_RE: re.Pattern[str] = re.compile(rf"\[({_TAGS})_([0-9]{{3}})\]")


def format_placeholder(pii_type: PIIType, number: int) -> str:
    return f"[{pii_type.value}_{number:03d}]"


def parse_placeholder(placeholder: str) -> tuple[PIIType, int] | None:
    """Split a placeholder into its category and number.

    Returns None when *placeholder* is not exactly one well-formed token.
    """
    m = PLACEHOLDER_RE.fullmatch(placeholder)
    if m is None:
        return None
    return PIIType(m.group(1)), int(m.group(2))


def contains_placeholder(text: str) -> bool:
    return PLACEHOLDER_RE.search(text) is not None
