"""Global constants for export-tool"""

from enum import Enum
import re

APP_NAME = "export-tool"
LOG_FORMAT = "%(message)s"

# Project configuration
PROJECT_CONFIG_FILE = ".export-tool.yaml"
DEFAULT_STATUS_FILE = "~/.export-tool/status.json"

# Workspace layout
METADATA_FILE = "metadata.json"
CHECKSUM_SUFFIX = ".md5"
ARCHIVE_SUFFIX = ".zip"
COMPOSE_FILE = "docker-compose.yaml"
START_SCRIPT = "run.sh"
COMPONENT_IMAGES_FILE = "component-images.tar"
IMAGE_TARBALL_PATTERN = "{name}.image.tar"

# Image transfer defaults
DEFAULT_PULL_ATTEMPTS = 15
DEFAULT_TAG_ATTEMPTS = 2
DEFAULT_RETRY_DELAY = 1.0  # seconds
DEFAULT_REGISTRY_DOMAIN = "goodrain.me"
DEFAULT_RUNNER_IMAGE = "goodrain.me/runner"
DEFAULT_IMAGE_TAG = "latest"

# Environment rendering
ENV_PLACEHOLDER = "**None**"
GENERATED_TOKEN_LENGTH = 8
PORT_ENV_KEY = "PORT"
MEMORY_ENV_KEY = "MEMORY_SIZE"
DEFAULT_MEMORY_LABEL = "small"
MEMORY_LABELS = {
    128: "micro",
    256: "small",
    512: "medium",
    1024: "large",
    2048: "2xlarge",
    4096: "4xlarge",
    8192: "8xlarge",
    16384: "16xlarge",
    32768: "32xlarge",
    65536: "64xlarge",
}

# Compose descriptor defaults
COMPOSE_VERSION = "2.1"
DEFAULT_RESTART_POLICY = "always"
DEFAULT_NETWORK_MODE = "host"
DEFAULT_LOG_DRIVER = "json-file"
DEFAULT_LOG_MAX_SIZE = "5m"
DEFAULT_LOG_MAX_FILE = "2"

# Naming
NAME_SUFFIX_LENGTH = 4
IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9._-]+")
ESCAPED_CODE_POINT_PATTERN = re.compile(r"\\{1,2}u([0-9a-fA-F]{4})")
CJK_RANGES = (
    (0x4E00, 0x9FFF),
    (0x3400, 0x4DBF),
)

# Metrics scrape defaults
SCRAPE_INTERVAL = "1m"
SCRAPE_TIMEOUT = "30s"
SCRAPE_METRICS_PATH = "/metrics"


class ExportFormat(Enum):
    """Supported export formats"""
    PLATFORM_NATIVE = "rainbond-app"
    COMPOSE = "docker-compose"

    @classmethod
    def values(cls):
        return [member.value for member in cls]


class VolumeType(Enum):
    """Volume type tags understood by the exporter"""
    REGULAR = "share-file"
    CONFIG_FILE = "config-file"


class TaskStatus(Enum):
    """Status values persisted to the status store"""
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


# Error codes
class ErrorCode:
    MANIFEST_UNAVAILABLE = "ET001"
    MANIFEST_MALFORMED = "ET002"
    UNSUPPORTED_FORMAT = "ET003"
    IMAGE_OPERATION_FAILED = "ET004"
    ARTIFACT_TRANSFER_FAILED = "ET005"
    ARCHIVAL_FAILED = "ET006"
    STATUS_PERSIST_FAILED = "ET007"
    CONFIG_FORMAT_ERROR = "ET008"
    VOLUME_BINDING_UNRESOLVED = "ET009"
    WORKSPACE_ERROR = "ET010"


# Environment variables
ENV_CONFIG_PATH = "EXPORT_TOOL_CONFIG"
ENV_LOG_LEVEL = "EXPORT_TOOL_LOG_LEVEL"
ENV_REGISTRY_DOMAIN = "EXPORT_TOOL_REGISTRY_DOMAIN"
ENV_STATUS_FILE = "EXPORT_TOOL_STATUS_FILE"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_PACKAGE = "📦"
