import json
from pathlib import Path

import pytest

from airlock.anonymization.anonymizer import Anonymizer
from airlock.detection.models import PIIType
from airlock.mapping.exceptions import MappingFormatError, MappingLoadError
from airlock.mapping.models import MappingEntry, SessionMapping
from airlock.mapping.storage import MAPPING_VERSION, MappingStorage


def _write(path: Path, document: object) -> Path:
    path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
    return path


def _document(*entries: dict[str, str]) -> dict[str, object]:
    return {"version": MAPPING_VERSION, "entries": list(entries)}


def _raw(placeholder: str, original: str, pii_type: str) -> dict[str, str]:
    return {"placeholder": placeholder, "original": original, "type": pii_type, "sourceFile": "a.txt"}


@pytest.mark.integration
class TestSave:
    def test_writes_new_layout_beside_output(self, tmp_path: Path) -> None:
        mapping = SessionMapping()
        mapping.register(MappingEntry("[NAME_001]", "山田 太郎", PIIType.NAME, "memo.txt"))
        output = tmp_path / "airlock" / "project"

        path = MappingStorage().save(mapping, output, tmp_path / "project")

        assert path == tmp_path / "airlock" / ".mapping" / "project.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == MAPPING_VERSION
        assert data["sourceFolder"] == str(tmp_path / "project")
        assert data["outputFolder"] == str(output)
        assert data["entries"] == [
            {
                "placeholder": "[NAME_001]",
                "original": "山田 太郎",
                "type": "NAME",
                "sourceFile": "memo.txt",
            }
        ]
        assert data["createdAt"].endswith("Z")

    def test_keeps_non_ascii_readable(self, tmp_path: Path) -> None:
        mapping = SessionMapping()
        mapping.register(MappingEntry("[NAME_001]", "山田太郎", PIIType.NAME, "a.txt"))
        path = tmp_path / "m.json"
        MappingStorage().save_to(path, mapping)
        assert "山田太郎" in path.read_text(encoding="utf-8")

    def test_preserves_created_at(self, tmp_path: Path) -> None:
        storage = MappingStorage()
        path = tmp_path / "m.json"
        _write(path, {**_document(), "createdAt": "2024-01-01T00:00:00.000Z"})

        storage.save_to(path, SessionMapping())

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["createdAt"] == "2024-01-01T00:00:00.000Z"
        assert data["updatedAt"] != data["createdAt"]


@pytest.mark.integration
class TestLoad:
    def test_round_trip(self, tmp_path: Path) -> None:
        storage = MappingStorage()
        mapping = SessionMapping()
        mapping.register(MappingEntry("[NAME_001]", "山田 太郎", PIIType.NAME, "a.txt"))
        mapping.register(MappingEntry("[PHONE_001]", "03-1234-5678", PIIType.PHONE, "a.txt"))
        path = tmp_path / "m.json"
        storage.save_to(path, mapping)

        loaded = storage.load(path)

        assert len(loaded) == 2
        assert loaded.get_entry("[PHONE_001]").original == "03-1234-5678"
        assert loaded.lookup("山田太郎", PIIType.NAME) == "[NAME_001]"

    def test_counters_follow_highest_number(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "m.json",
            _document(
                _raw("[NAME_002]", "佐藤花子", "NAME"),
                _raw("[NAME_007]", "鈴木一郎", "NAME"),
                _raw("[EMAIL_003]", "a@example.com", "EMAIL"),
            ),
        )
        mapping = MappingStorage().load(path)

        assert mapping.counters[PIIType.NAME] == 7
        assert mapping.counters[PIIType.EMAIL] == 3
        assert mapping.counters[PIIType.PHONE] == 0

        placeholder, entry = Anonymizer().anonymize_single_value(
            "高橋次郎", PIIType.NAME, mapping, "b.txt"
        )
        assert placeholder == "[NAME_008]"
        assert entry is not None

    def test_minimal_document(self, tmp_path: Path) -> None:
        mapping = MappingStorage().load(_write(tmp_path / "m.json", {"entries": []}))
        assert mapping.is_empty()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(MappingLoadError):
            MappingStorage().load(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "m.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(MappingLoadError):
            MappingStorage().load(path)

    @pytest.mark.parametrize(
        "document",
        [
            [],
            {"entries": {}},
            {"entries": ["[NAME_001]"]},
            _document(_raw("[NAME_1]", "x", "NAME")),
            _document(_raw("[NAME_001]", "x", "UNKNOWN")),
            _document(_raw("[NAME_001]", "x", "PHONE")),
            _document({"placeholder": "[NAME_001]", "original": 1, "type": "NAME"}),
        ],
    )
    def test_invalid_structure_raises_format_error(
        self, tmp_path: Path, document: object
    ) -> None:
        path = _write(tmp_path / "m.json", document)
        with pytest.raises(MappingFormatError):
            MappingStorage().load(path)

    def test_format_error_is_a_load_error(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "m.json", {"entries": 1})
        with pytest.raises(MappingLoadError):
            MappingStorage().load(path)
