import argparse
import sys
from pathlib import Path

from airlock.config.settings import Settings
from airlock.logging.logger import Log
from airlock.processor.exceptions import ProcessorError
from airlock.processor.file_loader import FileLoader
from airlock.processor.file_processor import build_file_processor
from airlock.processor.models import ProcessResult


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="airlock",
        description="Pseudonymize Japanese PII in files and restore it afterwards.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    anonymize = commands.add_parser("anonymize", help="write a pseudonymized copy")
    anonymize.add_argument("path", type=Path, help="file or folder to pseudonymize")
    anonymize.add_argument("--output", type=Path, default=None, help="output folder")

    restore = commands.add_parser("restore", help="restore placeholders in place")
    restore.add_argument("path", type=Path, help="file or folder to restore")
    restore.add_argument("--mapping", type=Path, default=None, help="mapping file to use")

    scan = commands.add_parser("scan", help="count detected PII without rewriting")
    scan.add_argument("path", type=Path, help="file to scan")

    return parser


def _report(result: ProcessResult) -> int:
    print(
        f"files: {result.files_processed}, pii: {result.pii_found}, "
        f"output: {result.output_path or '-'}, mapping: {result.mapping_path or '-'}"
    )
    for error in result.errors:
        print(f"  {error}", file=sys.stderr)
    return 0 if result.success else 1


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> logging -> processor -> command."""
    args = _build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    processor = build_file_processor(settings)

    if args.command == "anonymize":
        if args.path.is_dir():
            return _report(processor.anonymize_folder(args.path, args.output))
        return _report(processor.anonymize_file(args.path, args.output))

    if args.command == "restore":
        if args.path.is_dir():
            return _report(processor.deanonymize_folder(args.path, args.mapping))
        return _report(processor.deanonymize_file(args.path, args.mapping))

    try:
        text = FileLoader(encoding=settings.text_encoding).load(args.path)
    except (FileNotFoundError, ProcessorError) as exc:
        Log.error(f"Failed to scan {args.path}: {exc}")
        return 1
    summary = processor.preview(text)
    print(f"total: {summary.total}")
    for pii_type, count in summary.by_type.items():
        print(f"  {pii_type.value}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
