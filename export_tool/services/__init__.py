# export_tool/services/__init__.py
"""Service layer for export-tool"""

from .config_service import ConfigService
from .export_service import ExportService

__all__ = [
    "ConfigService",
    "ExportService",
]
