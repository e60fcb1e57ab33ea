"""Export renderers and artifact delivery"""

from .renderers import DocumentRenderer, ExportFormat, artifact_file_names
from .file_handler import FileHandler
from .export_service import (
    ExportService,
    ExportOutcome,
    SharePayload,
    ShareFile,
    ShareHandler,
)

__all__ = [
    "DocumentRenderer",
    "ExportFormat",
    "artifact_file_names",
    "FileHandler",
    "ExportService",
    "ExportOutcome",
    "SharePayload",
    "ShareFile",
    "ShareHandler",
]
