import pytest

from airlock.anonymization.anonymizer import Anonymizer
from airlock.deanonymization.deanonymizer import Deanonymizer
from airlock.detection.detector import PIIDetector
from airlock.detection.models import PIIType
from airlock.detection.registry import PatternRegistry
from airlock.mapping.models import SessionMapping


@pytest.fixture()
def detector() -> PIIDetector:
    """Detector over the built-in default rules."""
    return PIIDetector(PatternRegistry().active_patterns())


@pytest.fixture()
def anonymizer() -> Anonymizer:
    return Anonymizer()


@pytest.fixture()
def deanonymizer() -> Deanonymizer:
    return Deanonymizer()


@pytest.fixture()
def mapping() -> SessionMapping:
    return SessionMapping()


@pytest.fixture()
def dob_gated_detector() -> PIIDetector:
    """Detector whose birth-date rules only fire behind a context keyword."""
    registry = PatternRegistry()
    registry.set_enabled(PIIType.DOB, False)
    registry.set_context_required(PIIType.DOB, True)
    return PIIDetector(registry.active_patterns())
