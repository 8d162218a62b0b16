from airlock.mapping.models import MappingEntry, MappingStats, SessionMapping
from airlock.mapping.storage import MappingStorage

__all__ = ["MappingEntry", "MappingStats", "MappingStorage", "SessionMapping"]
