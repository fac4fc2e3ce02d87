# export_tool/utils/file_utils.py
"""File operation utilities"""

import os
import shutil
import zipfile
from pathlib import Path
from typing import Union


def ensure_directory(directory: Path) -> Path:
    """
    Create directory (and parents) if missing

    Args:
        directory: Directory path

    Returns:
        The directory path
    """
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def ensure_parent_dir(file_path: Path) -> Path:
    """
    Ensure parent directory exists

    Args:
        file_path: File path

    Returns:
        Parent directory path
    """
    parent = file_path.parent
    parent.mkdir(parents=True, exist_ok=True)
    return parent


def safe_remove(path: Path) -> bool:
    """
    Remove file or directory if present

    Args:
        path: Path to remove

    Returns:
        True if something was removed
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False


def create_archive(source_dir: Path, output_file: Path) -> Path:
    """
    Create zip archive from directory

    Entries are named relative to source_dir; the process working
    directory is never changed.

    Args:
        source_dir: Source directory
        output_file: Output archive path

    Returns:
        Path to created archive
    """
    with zipfile.ZipFile(output_file, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
        for root, dirs, files in os.walk(source_dir):
            dirs.sort()
            root_path = Path(root)
            for name in dirs:
                path = root_path / name
                zf.write(path, path.relative_to(source_dir).as_posix() + '/')
            for name in sorted(files):
                path = root_path / name
                zf.write(path, path.relative_to(source_dir).as_posix())

    return output_file


def atomic_write(file_path: Path,
                 content: Union[str, bytes],
                 mode: str = 'w') -> None:
    """
    Write file atomically

    Args:
        file_path: Target file path
        content: Content to write
        mode: Write mode
    """
    import tempfile

    temp_fd, temp_path = tempfile.mkstemp(dir=file_path.parent)

    try:
        with os.fdopen(temp_fd, mode) as f:
            f.write(content)

        os.replace(temp_path, file_path)

    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise
