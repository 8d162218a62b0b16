from dataclasses import dataclass


@dataclass(frozen=True)
class PlaceholderInfo:
    """A placeholder occurrence; ``end`` is exclusive."""

    placeholder: str
    start: int
    end: int
