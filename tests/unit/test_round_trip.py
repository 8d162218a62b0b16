from airlock.anonymization.anonymizer import Anonymizer
from airlock.deanonymization.deanonymizer import Deanonymizer
from airlock.detection.detector import PIIDetector
from airlock.detection.models import PIIType
from airlock.mapping.models import SessionMapping
from airlock.mapping.placeholders import PLACEHOLDER_RE

SAMPLE = (
    "氏名: 山田 太郎\n"
    "電話: 090-1234-5678\n"
    "メール: taro@example.jp\n"
    "住所: 〒100-0001 東京都千代田区1-1\n"
    "マイナンバー: 1234 5678 9012\n"
    "生年月日: 1985年4月1日\n"
)


class TestRoundTrip:
    def test_restore_returns_original_text(
        self,
        detector: PIIDetector,
        anonymizer: Anonymizer,
        deanonymizer: Deanonymizer,
        mapping: SessionMapping,
    ) -> None:
        result = anonymizer.anonymize(SAMPLE, detector.detect(SAMPLE), mapping, "sample.txt")
        assert deanonymizer.deanonymize(result.anonymized_text, mapping) == SAMPLE

    def test_every_category_is_replaced(
        self,
        detector: PIIDetector,
        anonymizer: Anonymizer,
        mapping: SessionMapping,
    ) -> None:
        result = anonymizer.anonymize(SAMPLE, detector.detect(SAMPLE), mapping, "sample.txt")
        tags = {m.group(1) for m in PLACEHOLDER_RE.finditer(result.anonymized_text)}
        assert tags == {t.value for t in PIIType}
        for original in ("山田 太郎", "090-1234-5678", "taro@example.jp", "1234 5678 9012"):
            assert original not in result.anonymized_text

    def test_second_pass_adds_nothing(
        self,
        detector: PIIDetector,
        anonymizer: Anonymizer,
        mapping: SessionMapping,
    ) -> None:
        first = anonymizer.anonymize(SAMPLE, detector.detect(SAMPLE), mapping, "a.txt")
        second = anonymizer.anonymize(SAMPLE, detector.detect(SAMPLE), mapping, "b.txt")
        assert second.new_entries == []
        assert second.anonymized_text == first.anonymized_text

    def test_foreign_placeholder_survives(
        self,
        detector: PIIDetector,
        anonymizer: Anonymizer,
        deanonymizer: Deanonymizer,
        mapping: SessionMapping,
    ) -> None:
        text = "[PHONE_999] と 03-1234-5678"
        result = anonymizer.anonymize(text, detector.detect(text), mapping, "a.txt")
        assert result.anonymized_text == "[PHONE_999] と [PHONE_001]"
        assert deanonymizer.deanonymize(result.anonymized_text, mapping) == text
