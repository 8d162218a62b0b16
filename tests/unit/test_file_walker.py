from pathlib import Path

from airlock.processor.file_walker import FileWalker


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x", encoding="utf-8")


class TestFileWalker:
    def test_is_target_ignores_case(self) -> None:
        walker = FileWalker([".txt", ".yaml"])
        assert walker.is_target(Path("a.TXT"))
        assert not walker.is_target(Path("a.pdf"))

    def test_walk_recurses_and_sorts(self, tmp_path: Path) -> None:
        _touch(tmp_path / "b.txt")
        _touch(tmp_path / "sub" / "a.yaml")
        _touch(tmp_path / "a.txt")
        _touch(tmp_path / "image.png")
        walker = FileWalker([".txt", ".yaml"])
        assert walker.walk(tmp_path) == [
            tmp_path / "a.txt",
            tmp_path / "b.txt",
            tmp_path / "sub" / "a.yaml",
        ]

    def test_walk_skips_mapping_files(self, tmp_path: Path) -> None:
        _touch(tmp_path / "mapping.json")
        _touch(tmp_path / ".mapping" / "project.json")
        _touch(tmp_path / "data.json")
        walker = FileWalker([".json"])
        assert walker.walk(tmp_path) == [tmp_path / "data.json"]
