# export_tool/collaborators/status_store.py
"""Status store implementations"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import aiofiles

from ..api.exceptions import StatusPersistError
from ..utils.file_utils import atomic_write, ensure_parent_dir
from .base import StatusStore

logger = logging.getLogger(__name__)


class InMemoryStatusStore(StatusStore):
    """Keeps status records in a dictionary"""

    def __init__(self, records: Optional[Dict[str, Dict[str, Any]]] = None):
        self.records: Dict[str, Dict[str, Any]] = dict(records or {})

    async def get_by_task_id(self, task_id: str) -> Dict[str, Any]:
        if task_id not in self.records:
            raise StatusPersistError(task_id, "status record not found")
        return dict(self.records[task_id])

    async def update(self, record: Dict[str, Any]) -> None:
        task_id = record.get('event_id')
        if not task_id:
            raise StatusPersistError(str(task_id), "record has no event_id")
        self.records[task_id] = dict(record)


class JsonFileStatusStore(StatusStore):
    """Persists {event_id: record} to one JSON file"""

    def __init__(self, path: Union[str, Path]):
        """
        Initialize JSON file status store

        Args:
            path: Status file, created on first update
        """
        self.path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    async def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}
        async with aiofiles.open(self.path, 'r', encoding='utf-8') as f:
            content = await f.read()
        if not content.strip():
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    async def get_by_task_id(self, task_id: str) -> Dict[str, Any]:
        try:
            records = await self._load()
        except (OSError, ValueError) as e:
            raise StatusPersistError(task_id, str(e)) from e

        if task_id not in records:
            raise StatusPersistError(task_id, "status record not found")
        return records[task_id]

    async def update(self, record: Dict[str, Any]) -> None:
        task_id = record.get('event_id')
        if not task_id:
            raise StatusPersistError(str(task_id), "record has no event_id")

        async with self._lock:
            try:
                records = await self._load()
                records[task_id] = record
                ensure_parent_dir(self.path)
                content = json.dumps(records, indent=2, ensure_ascii=False)
                await asyncio.to_thread(atomic_write, self.path, content)
            except (OSError, ValueError, TypeError) as e:
                raise StatusPersistError(task_id, str(e)) from e

        logger.debug(f"Status of {task_id} stored in {self.path}")
