"""JSON persistence for session mappings.

Document layout::

    {
      "version": "1.0.0",
      "createdAt": "...", "updatedAt": "...",
      "sourceFolder": "...", "outputFolder": "...",
      "entries": [
        {"placeholder": "[NAME_001]", "original": "...",
         "type": "NAME", "sourceFile": "..."}
      ]
    }

Loading rebuilds the reverse index (name alias included) and sets every
category counter to the highest number found among its placeholders, so a
reloaded mapping can never mint a number that is already persisted.
"""

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from airlock.detection.models import PIIType
from airlock.logging.logger import Log
from airlock.mapping.exceptions import MappingFormatError, MappingLoadError
from airlock.mapping.locator import mapping_path_for
from airlock.mapping.models import MappingEntry, SessionMapping
from airlock.mapping.placeholders import parse_placeholder

MAPPING_VERSION = "1.0.0"


def _utc_now_iso() -> str:
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return now.replace("+00:00", "Z")


class MappingStorage:
    """Saves and loads session mappings as UTF-8 JSON files."""

    def save(
        self,
        mapping: SessionMapping,
        output_folder: Path,
        source_folder: Path | str = "",
    ) -> Path:
        """Save *mapping* under the new layout for *output_folder*.

        Returns:
            Path of the written mapping file.
        """
        path = mapping_path_for(output_folder.absolute())
        self.save_to(path, mapping, source_folder=source_folder, output_folder=output_folder)
        return path

    def save_to(
        self,
        path: Path,
        mapping: SessionMapping,
        source_folder: Path | str = "",
        output_folder: Path | str = "",
    ) -> None:
        """Write *mapping* to *path*, keeping ``createdAt`` of a previous save."""
        now = _utc_now_iso()
        document = {
            "version": MAPPING_VERSION,
            "createdAt": self._existing_created_at(path) or now,
            "updatedAt": now,
            "sourceFolder": str(source_folder),
            "outputFolder": str(output_folder),
            "entries": [
                {
                    "placeholder": entry.placeholder,
                    "original": entry.original,
                    "type": entry.type.value,
                    "sourceFile": entry.document_uri,
                }
                for entry in mapping.all_entries()
            ],
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        Log.info(f"Saved {len(mapping)} mapping entries to {path}")

    def load(self, path: Path) -> SessionMapping:
        """Load a mapping document.

        Raises:
            MappingLoadError: if the file cannot be read or is not JSON.
            MappingFormatError: if the document structure is invalid.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise MappingLoadError(f"Failed to read mapping file {path}: {exc}") from exc
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise MappingLoadError(f"Mapping file {path} is not valid JSON: {exc}") from exc

        mapping = build_mapping(data)
        Log.info(f"Loaded {len(mapping)} mapping entries from {path}")
        return mapping

    @staticmethod
    def _existing_created_at(path: Path) -> str | None:
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            Log.warning(f"Existing mapping {path} unreadable, resetting createdAt: {exc}")
            return None
        created_at = data.get("createdAt") if isinstance(data, dict) else None
        return created_at if isinstance(created_at, str) else None


def build_mapping(data: Any) -> SessionMapping:
    """Validate a parsed mapping document and build a SessionMapping.

    Raises:
        MappingFormatError: on any structural problem.
    """
    if not isinstance(data, dict):
        raise MappingFormatError("Mapping document must be an object")
    raw_entries = data.get("entries")
    if not isinstance(raw_entries, list):
        raise MappingFormatError("'entries' must be a list")

    mapping = SessionMapping(counters={pii_type: 0 for pii_type in PIIType})
    loaded_at = time.time()
    for i, raw in enumerate(raw_entries):
        entry = _build_entry(raw, i, loaded_at)
        mapping.register(entry)
        parsed = parse_placeholder(entry.placeholder)
        if parsed is not None:
            mapping.bump_counter(*parsed)
    return mapping


def _build_entry(raw: Any, index: int, created_at: float) -> MappingEntry:
    if not isinstance(raw, dict):
        raise MappingFormatError(f"entries[{index}] must be an object")

    placeholder = raw.get("placeholder")
    original = raw.get("original")
    type_value = raw.get("type")
    source_file = raw.get("sourceFile", "")

    parsed = parse_placeholder(placeholder) if isinstance(placeholder, str) else None
    if parsed is None:
        raise MappingFormatError(f"entries[{index}].placeholder is not a valid placeholder")
    if not isinstance(original, str):
        raise MappingFormatError(f"entries[{index}].original must be a string")
    if not isinstance(source_file, str):
        raise MappingFormatError(f"entries[{index}].sourceFile must be a string")
    try:
        pii_type = PIIType(type_value)
    except ValueError as exc:
        raise MappingFormatError(f"entries[{index}].type is unknown: {type_value!r}") from exc

    if parsed[0] != pii_type:
        raise MappingFormatError(
            f"entries[{index}] type {pii_type.value} does not match placeholder {placeholder}"
        )

    return MappingEntry(
        placeholder=placeholder,
        original=original,
        type=pii_type,
        document_uri=source_file,
        created_at=created_at,
    )
