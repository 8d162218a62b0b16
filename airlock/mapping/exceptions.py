class MappingError(Exception):
    """Base exception for mapping persistence errors."""


class MappingLoadError(MappingError):
    """Raised when a persisted mapping cannot be read or parsed."""


class MappingFormatError(MappingLoadError):
    """Raised when a mapping document parses but has an invalid structure."""
