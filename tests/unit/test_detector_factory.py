from airlock.config.settings import Settings
from airlock.detection.detector import PIIDetector
from airlock.detection.factory import DetectorFactory
from airlock.detection.models import PIIType


class TestDetectorFactory:
    def test_creates_detector(self) -> None:
        detector = DetectorFactory.create(Settings())
        assert isinstance(detector, PIIDetector)

    def test_disabled_category_is_not_detected(self) -> None:
        detector = DetectorFactory.create(Settings(detect_email=False))
        assert detector.detect("mail: test@example.com") == []

    def test_dob_context_required_gates_dates(self) -> None:
        detector = DetectorFactory.create(Settings(dob_context_required=True))
        assert detector.detect("1990/01/15") == []
        assert [m.type for m in detector.detect("誕生日: 1990/01/15")] == [PIIType.DOB]

    def test_context_flag_ignored_when_dob_disabled(self) -> None:
        registry = DetectorFactory.create_registry(
            Settings(detect_dob=False, dob_context_required=True)
        )
        assert PIIType.DOB not in {r.type for r in registry.active_patterns()}
