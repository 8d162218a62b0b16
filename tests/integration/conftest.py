from pathlib import Path

import pytest

from airlock.config.settings import Settings
from airlock.processor.file_processor import FileProcessor, build_file_processor


@pytest.fixture()
def test_settings() -> Settings:
    return Settings()


@pytest.fixture()
def file_processor(test_settings: Settings) -> FileProcessor:
    return build_file_processor(test_settings)


@pytest.fixture()
def source_project(tmp_path: Path) -> Path:
    """``<tmp>/workspace/project`` with a text file, a YAML file and a nested CSV."""
    project = tmp_path / "workspace" / "project"
    (project / "data").mkdir(parents=True)
    (project / "memo.txt").write_text(
        "担当: 山田 太郎\n電話: 03-1234-5678\nメール: taro@example.com\n",
        encoding="utf-8",
    )
    (project / "staff.yaml").write_text(
        "name: 田中太郎\ntel: 090-1234-5678\n",
        encoding="utf-8",
    )
    (project / "data" / "list.csv").write_text(
        "id,tel\n1,03-1234-5678\n",
        encoding="utf-8",
    )
    (project / "image.png").write_bytes(b"\x89PNG")
    return project
