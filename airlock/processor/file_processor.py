from pathlib import Path

from airlock.anonymization.anonymizer import Anonymizer
from airlock.anonymization.exceptions import AnonymizationError
from airlock.config.settings import Settings
from airlock.deanonymization.deanonymizer import Deanonymizer
from airlock.detection.detector import PIIDetector
from airlock.detection.factory import DetectorFactory
from airlock.detection.models import DetectionSummary
from airlock.logging.logger import Log
from airlock.mapping.exceptions import MappingLoadError
from airlock.mapping.locator import find_mapping_path
from airlock.mapping.models import SessionMapping
from airlock.mapping.storage import MappingStorage
from airlock.processor.exceptions import ProcessorError, UnsupportedFileTypeError
from airlock.processor.file_loader import FileLoader
from airlock.processor.file_walker import FileWalker
from airlock.processor.models import ProcessResult

_FILE_ERRORS = (ProcessorError, AnonymizationError, FileNotFoundError)


class FileProcessor:
    """Pseudonymizes files into an airlock folder and restores them in place.

    Anonymization: source -> detect -> anonymize -> write copy -> save mapping.
    Restoration: load mapping -> find placeholders -> restore -> overwrite.
    """

    def __init__(
        self,
        detector: PIIDetector,
        anonymizer: Anonymizer,
        deanonymizer: Deanonymizer,
        storage: MappingStorage,
        file_loader: FileLoader,
        file_walker: FileWalker,
        airlock_folder_name: str = "airlock",
        structural_extensions: frozenset[str] = frozenset({".yaml", ".yml"}),
    ) -> None:
        self._detector = detector
        self._anonymizer = anonymizer
        self._deanonymizer = deanonymizer
        self._storage = storage
        self._file_loader = file_loader
        self._file_walker = file_walker
        self._airlock_folder_name = airlock_folder_name
        self._structural_extensions = structural_extensions

    # ------------------------------------------------------------------
    # Anonymization
    # ------------------------------------------------------------------

    def airlock_output_path(self, source_folder: Path) -> Path:
        """Default output folder: ``<parent>/<airlock>/<source folder name>``.

        *source_folder* is resolved first so ``.`` maps to a sibling folder.
        """
        source_folder = source_folder.resolve()
        return source_folder.parent / self._airlock_folder_name / source_folder.name

    def anonymize_file(self, source: Path, output_folder: Path | None = None) -> ProcessResult:
        """Write a pseudonymized copy of *source* into the output folder."""
        source = source.resolve()
        output_dir = output_folder or self.airlock_output_path(source.parent)
        try:
            if not self._file_walker.is_target(source):
                raise UnsupportedFileTypeError(f"Unsupported file type: {source.suffix}")
            mapping = self._load_or_create_mapping(output_dir)
            pii_found = self._anonymize_into(source, output_dir / source.name, mapping)
            mapping_path = self._save_mapping(mapping, output_dir, source.parent)
        except (*_FILE_ERRORS, MappingLoadError) as exc:
            Log.error(f"Failed to anonymize {source}: {exc}")
            return ProcessResult(success=False, errors=[f"Error processing {source}: {exc}"])

        Log.info(f"Anonymized {source} -> {output_dir}: {pii_found} PII found")
        return ProcessResult(
            success=True,
            files_processed=1,
            pii_found=pii_found,
            output_path=output_dir,
            mapping_path=mapping_path,
        )

    def anonymize_folder(
        self,
        source_folder: Path,
        output_folder: Path | None = None,
    ) -> ProcessResult:
        """Pseudonymize every target file under *source_folder*.

        An existing mapping for the output folder is loaded first so values
        seen in earlier runs keep their placeholders.
        """
        source_folder = source_folder.resolve()
        output_dir = output_folder or self.airlock_output_path(source_folder)
        files = self._file_walker.walk(source_folder)
        if not files:
            return ProcessResult(
                success=True,
                output_path=output_dir,
                errors=["No target files found"],
            )

        try:
            mapping = self._load_or_create_mapping(output_dir)
        except MappingLoadError as exc:
            Log.error(f"Failed to load existing mapping for {output_dir}: {exc}")
            return ProcessResult(success=False, errors=[f"Error processing folder: {exc}"])

        errors: list[str] = []
        files_processed = 0
        pii_found = 0
        for path in files:
            target = output_dir / path.relative_to(source_folder)
            try:
                pii_found += self._anonymize_into(path, target, mapping)
                files_processed += 1
            except _FILE_ERRORS as exc:
                Log.error(f"Failed to anonymize {path}: {exc}")
                errors.append(f"Error processing {path}: {exc}")
            Log.debug(f"{files_processed}/{len(files)} files")

        mapping_path = self._save_mapping(mapping, output_dir, source_folder)
        Log.info(
            f"Anonymized folder {source_folder} -> {output_dir}: "
            f"{files_processed} files, {pii_found} PII found, {len(errors)} errors"
        )
        return ProcessResult(
            success=not errors,
            files_processed=files_processed,
            pii_found=pii_found,
            output_path=output_dir,
            mapping_path=mapping_path,
            errors=errors,
        )

    def preview(self, text: str) -> DetectionSummary:
        """Count what would be replaced in *text* without rewriting it."""
        return self._detector.summarize(text)

    # ------------------------------------------------------------------
    # Restoration
    # ------------------------------------------------------------------

    def deanonymize_file(self, path: Path, mapping_path: Path | None = None) -> ProcessResult:
        """Restore placeholders in *path* in place."""
        try:
            mapping = self._load_mapping_for(path.parent, mapping_path)
            content = self._file_loader.load(path)
            restored_count = self._restore_content(path, content, mapping)
        except (*_FILE_ERRORS, MappingLoadError) as exc:
            Log.error(f"Failed to restore {path}: {exc}")
            return ProcessResult(success=False, errors=[f"Error restoring {path}: {exc}"])

        errors = [] if restored_count else ["No placeholders found"]
        return ProcessResult(
            success=True,
            files_processed=1,
            pii_found=restored_count,
            output_path=path,
            errors=errors,
        )

    def deanonymize_folder(self, folder: Path, mapping_path: Path | None = None) -> ProcessResult:
        """Restore placeholders in every target file under *folder*."""
        try:
            mapping = self._load_mapping_for(folder, mapping_path)
        except MappingLoadError as exc:
            Log.error(f"Failed to load mapping for {folder}: {exc}")
            return ProcessResult(success=False, errors=[f"Error processing folder: {exc}"])

        files = self._file_walker.walk(folder)
        if not files:
            return ProcessResult(
                success=True,
                output_path=folder,
                errors=["No target files found"],
            )

        errors: list[str] = []
        files_processed = 0
        restored_total = 0
        for path in files:
            try:
                content = self._file_loader.load(path)
                restored_total += self._restore_content(path, content, mapping)
                files_processed += 1
            except _FILE_ERRORS as exc:
                Log.error(f"Failed to restore {path}: {exc}")
                errors.append(f"Error restoring {path}: {exc}")

        Log.info(
            f"Restored folder {folder}: {files_processed} files, "
            f"{restored_total} placeholders, {len(errors)} errors"
        )
        return ProcessResult(
            success=not errors,
            files_processed=files_processed,
            pii_found=restored_total,
            output_path=folder,
            errors=errors,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _anonymize_into(self, source: Path, target: Path, mapping: SessionMapping) -> int:
        content = self._file_loader.load(source)
        matches = self._detector.detect(content)
        output = content
        if matches:
            result = self._anonymizer.anonymize(
                content,
                matches,
                mapping,
                str(source),
                structural_mode=self._is_structural(source),
            )
            output = result.anonymized_text
        self._file_loader.save(target, output)
        return len(matches)

    def _restore_content(self, path: Path, content: str, mapping: SessionMapping) -> int:
        restorable = self._deanonymizer.count_restorable_placeholders(content, mapping)
        if restorable:
            restored = self._deanonymizer.deanonymize(content, mapping)
            self._file_loader.save(path, restored)
        return restorable

    def _is_structural(self, path: Path) -> bool:
        return path.suffix.lower() in self._structural_extensions

    def _load_or_create_mapping(self, output_dir: Path) -> SessionMapping:
        existing = find_mapping_path(output_dir, walk_up=False)
        if existing is None:
            return SessionMapping()
        Log.info(f"Reusing existing mapping {existing}")
        return self._storage.load(existing)

    def _load_mapping_for(self, folder: Path, mapping_path: Path | None) -> SessionMapping:
        path = mapping_path or find_mapping_path(folder)
        if path is None:
            raise MappingLoadError(f"No mapping found for {folder}")
        return self._storage.load(path)

    def _save_mapping(
        self,
        mapping: SessionMapping,
        output_dir: Path,
        source_folder: Path,
    ) -> Path | None:
        if mapping.is_empty():
            return None
        return self._storage.save(mapping, output_dir, source_folder)


def build_file_processor(settings: Settings) -> FileProcessor:
    """Build a FileProcessor with all collaborators from *settings*."""
    return FileProcessor(
        detector=DetectorFactory.create(settings),
        anonymizer=Anonymizer(),
        deanonymizer=Deanonymizer(),
        storage=MappingStorage(),
        file_loader=FileLoader(encoding=settings.text_encoding),
        file_walker=FileWalker(settings.file_extensions),
        airlock_folder_name=settings.airlock_folder_name,
        structural_extensions=frozenset(ext.lower() for ext in settings.structural_extensions),
    )
