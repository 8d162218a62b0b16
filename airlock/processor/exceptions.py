class ProcessorError(Exception):
    """Base exception for all file processing errors."""


class FileReadError(ProcessorError):
    """Raised when a file cannot be read or decoded."""


class FileWriteError(ProcessorError):
    """Raised when a rewritten file cannot be written."""


class UnsupportedFileTypeError(ProcessorError):
    """Raised when a file's extension is not configured for processing."""
