from airlock.config.settings import Settings
from airlock.detection.detector import PIIDetector
from airlock.detection.models import PIIType
from airlock.detection.registry import PatternRegistry


class DetectorFactory:
    """Creates a detector configured from settings."""

    @classmethod
    def create_registry(cls, settings: Settings) -> PatternRegistry:
        """Build a registry with per-category toggles applied.

        With ``dob_context_required`` the birth-date rules are switched from
        unconditional to context-gated (table header or same-line keyword).
        """
        registry = PatternRegistry()
        registry.update_from_config(settings.enabled_types())
        if settings.detect_dob and settings.dob_context_required:
            registry.set_enabled(PIIType.DOB, False)
            registry.set_context_required(PIIType.DOB, True)
        return registry

    @classmethod
    def create(cls, settings: Settings) -> PIIDetector:
        registry = cls.create_registry(settings)
        return PIIDetector(registry.active_patterns())
