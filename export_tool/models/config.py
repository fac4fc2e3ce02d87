"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Any

from ..constants import (
    COMPOSE_VERSION,
    DEFAULT_IMAGE_TAG,
    DEFAULT_LOG_DRIVER,
    DEFAULT_LOG_MAX_FILE,
    DEFAULT_LOG_MAX_SIZE,
    DEFAULT_NETWORK_MODE,
    DEFAULT_PULL_ATTEMPTS,
    DEFAULT_REGISTRY_DOMAIN,
    DEFAULT_RESTART_POLICY,
    DEFAULT_RETRY_DELAY,
    DEFAULT_RUNNER_IMAGE,
    DEFAULT_STATUS_FILE,
    DEFAULT_TAG_ATTEMPTS,
    ENV_PLACEHOLDER,
)


@dataclass
class ImageConfig:
    """Image transfer configuration"""

    pull_attempts: int = DEFAULT_PULL_ATTEMPTS
    tag_attempts: int = DEFAULT_TAG_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY
    registry_domain: str = DEFAULT_REGISTRY_DOMAIN
    default_tag: str = DEFAULT_IMAGE_TAG
    runner_image: str = DEFAULT_RUNNER_IMAGE
    registry_user: str = ""
    registry_password: str = ""
    docker_binary: str = "docker"

    def __post_init__(self):
        if self.pull_attempts < 1 or self.tag_attempts < 1:
            raise ValueError("Image attempts must be at least 1")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pull_attempts": self.pull_attempts,
            "tag_attempts": self.tag_attempts,
            "retry_delay": self.retry_delay,
            "registry_domain": self.registry_domain,
            "default_tag": self.default_tag,
            "runner_image": self.runner_image,
            "registry_user": self.registry_user,
            "registry_password": self.registry_password,
            "docker_binary": self.docker_binary,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImageConfig':
        return cls(
            pull_attempts=int(data.get("pull_attempts", DEFAULT_PULL_ATTEMPTS)),
            tag_attempts=int(data.get("tag_attempts", DEFAULT_TAG_ATTEMPTS)),
            retry_delay=float(data.get("retry_delay", DEFAULT_RETRY_DELAY)),
            registry_domain=data.get("registry_domain", DEFAULT_REGISTRY_DOMAIN),
            default_tag=data.get("default_tag", DEFAULT_IMAGE_TAG),
            runner_image=data.get("runner_image", DEFAULT_RUNNER_IMAGE),
            registry_user=data.get("registry_user", ""),
            registry_password=data.get("registry_password", ""),
            docker_binary=data.get("docker_binary", "docker"),
        )


@dataclass
class ComposeConfig:
    """Compose descriptor configuration"""

    version: str = COMPOSE_VERSION
    restart: str = DEFAULT_RESTART_POLICY
    network_mode: str = DEFAULT_NETWORK_MODE
    log_driver: str = DEFAULT_LOG_DRIVER
    log_max_size: str = DEFAULT_LOG_MAX_SIZE
    log_max_file: str = DEFAULT_LOG_MAX_FILE
    start_script: Optional[str] = None  # Override for the bundled run.sh

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "restart": self.restart,
            "network_mode": self.network_mode,
            "log_driver": self.log_driver,
            "log_max_size": self.log_max_size,
            "log_max_file": self.log_max_file,
            "start_script": self.start_script,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ComposeConfig':
        return cls(
            version=str(data.get("version", COMPOSE_VERSION)),
            restart=data.get("restart", DEFAULT_RESTART_POLICY),
            network_mode=data.get("network_mode", DEFAULT_NETWORK_MODE),
            log_driver=data.get("log_driver", DEFAULT_LOG_DRIVER),
            log_max_size=str(data.get("log_max_size", DEFAULT_LOG_MAX_SIZE)),
            log_max_file=str(data.get("log_max_file", DEFAULT_LOG_MAX_FILE)),
            start_script=data.get("start_script"),
        )


@dataclass
class ExportConfig:
    """Complete configuration"""

    version: str = "1.0"
    env_placeholder: str = ENV_PLACEHOLDER
    status_file: str = DEFAULT_STATUS_FILE
    log_level: str = "WARNING"
    images: ImageConfig = field(default_factory=ImageConfig)
    compose: ComposeConfig = field(default_factory=ComposeConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ExportConfig':
        """Create from dictionary"""
        data = data or {}
        return cls(
            version=str(data.get("version", "1.0")),
            env_placeholder=data.get("env_placeholder", ENV_PLACEHOLDER),
            status_file=data.get("status_file", DEFAULT_STATUS_FILE),
            log_level=str(data.get("log_level", "WARNING")).upper(),
            images=ImageConfig.from_dict(data.get("images") or {}),
            compose=ComposeConfig.from_dict(data.get("compose") or {}),
        )

    @classmethod
    def load(cls, path: Optional[str] = None) -> 'ExportConfig':
        """Defaults, then the YAML file, then environment overrides"""
        from ..services.config_service import ConfigService
        return ConfigService().load(path)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "version": self.version,
            "env_placeholder": self.env_placeholder,
            "status_file": self.status_file,
            "log_level": self.log_level,
            "images": self.images.to_dict(),
            "compose": self.compose.to_dict(),
        }
