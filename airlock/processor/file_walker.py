from collections.abc import Iterable
from pathlib import Path

from airlock.mapping.locator import MAPPING_FILENAME, MAPPING_FOLDER


class FileWalker:
    """Lists processable files below a folder."""

    def __init__(self, extensions: Iterable[str]) -> None:
        self._extensions = frozenset(ext.lower() for ext in extensions)

    def is_target(self, path: Path) -> bool:
        return path.suffix.lower() in self._extensions

    def walk(self, root: Path) -> list[Path]:
        """Target files under *root*, recursively, in sorted order.

        Mapping files (legacy ``mapping.json`` and the ``.mapping`` folder)
        are never returned.
        """
        files: list[Path] = []
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            if path.name == MAPPING_FILENAME:
                continue
            if MAPPING_FOLDER in path.relative_to(root).parts:
                continue
            if self.is_target(path):
                files.append(path)
        return files
