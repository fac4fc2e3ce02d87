# export_tool/utils/__init__.py
"""Utility functions for export-tool"""

from .file_utils import (
    ensure_directory,
    ensure_parent_dir,
    safe_remove,
    create_archive,
    atomic_write,
)

from .hash_utils import (
    calculate_md5,
    calculate_file_hash_async,
    write_checksum_file,
    verify_checksum_file,
)

from .template_utils import (
    render_template,
    substitute_variables,
    copy_template,
)

from .async_utils import (
    run_async,
    retry_async,
)

__all__ = [
    # File utilities
    "ensure_directory",
    "ensure_parent_dir",
    "safe_remove",
    "create_archive",
    "atomic_write",

    # Hash utilities
    "calculate_md5",
    "calculate_file_hash_async",
    "write_checksum_file",
    "verify_checksum_file",

    # Template utilities
    "render_template",
    "substitute_variables",
    "copy_template",

    # Async utilities
    "run_async",
    "retry_async",
]
