"""Exception definitions for export-tool API"""

from dataclasses import dataclass

from ..constants import ErrorCode


class ExportToolError(Exception):
    """Base exception for export-tool"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ManifestError(ExportToolError):
    """Manifest related error"""
    pass


class ManifestUnavailableError(ManifestError):
    """Manifest file missing or unreadable"""

    def __init__(self, path: str, reason: str = None):
        message = f"Manifest not available: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, ErrorCode.MANIFEST_UNAVAILABLE)
        self.path = path


class ManifestMalformedError(ManifestError):
    """Manifest content does not have the expected shape"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.MANIFEST_MALFORMED)


class UnsupportedFormatError(ExportToolError):
    """Requested export format is not known"""

    def __init__(self, export_format: str):
        super().__init__(f"Unsupported the format: {export_format}", ErrorCode.UNSUPPORTED_FORMAT)
        self.export_format = export_format


class ImageOperationError(ExportToolError):
    """Image pull/tag/save failure"""

    def __init__(self, operation: str, image: str, reason: str = None):
        message = f"Image {operation} failed for {image}"
        if reason:
            message += f": {reason}"
        super().__init__(message, ErrorCode.IMAGE_OPERATION_FAILED)
        self.operation = operation
        self.image = image


class ArtifactTransferError(ExportToolError):
    """Legacy build artifact could not be fetched"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.ARTIFACT_TRANSFER_FAILED)


class ArchivalError(ExportToolError):
    """Workspace archive or checksum sidecar could not be written"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.ARCHIVAL_FAILED)


class StatusPersistError(ExportToolError):
    """Status store could not be read or updated"""

    def __init__(self, task_id: str, reason: str):
        super().__init__(f"Failed to persist status of {task_id}: {reason}", ErrorCode.STATUS_PERSIST_FAILED)
        self.task_id = task_id


class WorkspaceError(ExportToolError):
    """Workspace preparation error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.WORKSPACE_ERROR)


class ConfigError(ExportToolError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


@dataclass(frozen=True)
class VolumeBindingUnresolved:
    """Non-fatal: a dependency volume binding whose source volume is unknown"""
    component: str
    target: str
    volume_name: str
    mount_path: str
    code: str = ErrorCode.VOLUME_BINDING_UNRESOLVED

    def __str__(self) -> str:
        if not self.mount_path:
            return (f"dependent volume {self.target}/{self.volume_name} "
                    f"requested by {self.component} has no mount path")
        return (f"dependent volume {self.target}/{self.volume_name} "
                f"requested by {self.component} not found")
