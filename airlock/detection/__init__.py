from airlock.detection.detector import PIIDetector
from airlock.detection.models import Match, PatternRule, PatternSpec, PIIType
from airlock.detection.registry import DEFAULT_PATTERNS, PatternRegistry

__all__ = [
    "DEFAULT_PATTERNS",
    "Match",
    "PIIDetector",
    "PIIType",
    "PatternRegistry",
    "PatternRule",
    "PatternSpec",
]
