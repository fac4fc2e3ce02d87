# export_tool/models/task.py
"""Export task and result models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any

from ..constants import TaskStatus


class ExportState(Enum):
    """States of the export state machine"""
    CREATED = "created"
    CHECKING_FRESHNESS = "checking_freshness"
    CLEANING_WORKSPACE = "cleaning_workspace"
    STAGING_ARTIFACTS = "staging_artifacts"
    GENERATING_DESCRIPTOR = "generating_descriptor"
    ARCHIVING = "archiving"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ExportState.SUCCEEDED, ExportState.FAILED)


@dataclass
class ExportTask:
    """Unit of work handed over by the task dispatcher"""
    event_id: str
    format: str
    source_dir: Path
    status: TaskStatus = TaskStatus.RUNNING
    state: ExportState = ExportState.CREATED
    history: List[ExportState] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        if isinstance(self.source_dir, str):
            self.source_dir = Path(self.source_dir)
        if not self.history:
            self.history.append(self.state)

    def transition(self, state: ExportState) -> None:
        """Move to a new state; terminal states are final"""
        if self.state.is_terminal:
            raise RuntimeError(f"Task {self.event_id} already finished in state {self.state.value}")
        self.state = state
        self.history.append(state)
        if state == ExportState.SUCCEEDED:
            self.status = TaskStatus.SUCCESS
        elif state == ExportState.FAILED:
            self.status = TaskStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_id': self.event_id,
            'format': self.format,
            'source_dir': str(self.source_dir),
            'status': self.status.value,
            'state': self.state.value,
            'history': [s.value for s in self.history],
            'created_at': self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExportTask':
        """Create from a dispatcher payload"""
        return cls(
            event_id=str(data.get('event_id') or ''),
            format=str(data.get('format') or ''),
            source_dir=Path(str(data.get('source_dir') or '')),
        )


@dataclass
class ExportResult:
    """Export operation result"""
    success: bool
    event_id: str
    format: str
    state: ExportState
    archive_path: Optional[str] = None
    cached: bool = False
    status_persisted: bool = True
    error: Optional[str] = None
    error_code: Optional[str] = None
    duration: float = 0.0
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'success': self.success,
            'event_id': self.event_id,
            'format': self.format,
            'state': self.state.value,
            'cached': self.cached,
            'status_persisted': self.status_persisted,
            'duration': self.duration,
        }

        if self.archive_path:
            data['archive_path'] = self.archive_path
        if self.error:
            data['error'] = self.error
        if self.error_code:
            data['error_code'] = self.error_code
        if self.warnings:
            data['warnings'] = self.warnings
        if self.metadata:
            data['metadata'] = self.metadata

        return data
