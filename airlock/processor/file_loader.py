from pathlib import Path

from airlock.processor.exceptions import FileReadError, FileWriteError


class FileLoader:
    """Reads and writes text files with the configured encoding."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def load(self, path: Path) -> str:
        """Read *path* as text, keeping its line endings as they are.

        Raises:
            FileNotFoundError: if the file does not exist.
            FileReadError: if the file cannot be read or decoded.
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        try:
            with path.open(encoding=self._encoding, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise FileReadError(f"Failed to read {path}: {exc}") from exc

    def save(self, path: Path, content: str) -> None:
        """Write *content* to *path*, creating parent folders.

        Raises:
            FileWriteError: if the file cannot be written.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding=self._encoding, newline="") as f:
                f.write(content)
        except OSError as exc:
            raise FileWriteError(f"Failed to write {path}: {exc}") from exc
