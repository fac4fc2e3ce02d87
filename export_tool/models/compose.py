# export_tool/models/compose.py
"""Compose descriptor models"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

import yaml

from ..constants import (
    COMPOSE_VERSION,
    DEFAULT_LOG_DRIVER,
    DEFAULT_LOG_MAX_SIZE,
    DEFAULT_LOG_MAX_FILE,
)


@dataclass(frozen=True)
class LoggingPolicy:
    """Container logging policy"""
    driver: str = DEFAULT_LOG_DRIVER
    max_size: str = DEFAULT_LOG_MAX_SIZE
    max_file: str = DEFAULT_LOG_MAX_FILE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'driver': self.driver}
        options = {}
        if self.max_size:
            options['max-size'] = self.max_size
        if self.max_file:
            options['max-file'] = self.max_file
        if options:
            data['options'] = options
        return data


@dataclass
class ComposeService:
    """Service entry of a compose descriptor"""
    image: Optional[str]
    container_name: str
    restart: str
    network_mode: str
    volumes: List[str] = field(default_factory=list)
    command: str = ""
    environment: Dict[str, str] = field(default_factory=dict)
    depends_on: List[str] = field(default_factory=list)
    logging: LoggingPolicy = field(default_factory=LoggingPolicy)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting empty optional fields"""
        data: Dict[str, Any] = {}
        if self.image:
            data['image'] = self.image
        if self.container_name:
            data['container_name'] = self.container_name
        if self.restart:
            data['restart'] = self.restart
        if self.network_mode:
            data['network_mode'] = self.network_mode
        if self.volumes:
            data['volumes'] = list(self.volumes)
        if self.command:
            data['command'] = self.command
        if self.environment:
            data['environment'] = dict(self.environment)
        if self.depends_on:
            data['depends_on'] = list(self.depends_on)
        data['logging'] = self.logging.to_dict()
        return data


@dataclass
class ComposeDescriptor:
    """Generated multi-container descriptor"""
    version: str = COMPOSE_VERSION
    volumes: List[str] = field(default_factory=list)
    services: Dict[str, ComposeService] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'version': self.version}
        if self.volumes:
            data['volumes'] = {name: {'external': False} for name in self.volumes}
        if self.services:
            data['services'] = {name: svc.to_dict() for name, svc in self.services.items()}
        return data

    def to_yaml(self) -> str:
        """Serialize to YAML text"""
        return yaml.safe_dump(
            self.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
