"""Hash calculation utilities"""

import hashlib
import logging
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

logger = logging.getLogger(__name__)


def calculate_md5(file_path: Path, chunk_size: int = 8192) -> str:
    """
    Calculate MD5 hash of file

    Args:
        file_path: Path to file
        chunk_size: Read chunk size

    Returns:
        Hex digest string
    """
    md5_hash = hashlib.md5()

    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            md5_hash.update(chunk)

    return md5_hash.hexdigest()


async def calculate_file_hash_async(file_path: Path,
                                    algorithm: str = "md5",
                                    chunk_size: int = 8192) -> str:
    """
    Calculate file hash asynchronously

    Args:
        file_path: Path to file
        algorithm: Hash algorithm
        chunk_size: Read chunk size

    Returns:
        Hex digest string
    """
    hash_func = hashlib.new(algorithm)

    async with aiofiles.open(file_path, 'rb') as f:
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                break
            hash_func.update(chunk)

    return hash_func.hexdigest()


def format_checksum_line(checksum: str, file_path: Path) -> str:
    """md5sum text format: '<hex>  <path>\\n'"""
    return f"{checksum}  {file_path}\n"


def parse_checksum_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Parse one md5sum line

    Args:
        line: Line of a checksum file

    Returns:
        Tuple of (checksum, path) or None if the line is not a checksum record
    """
    line = line.strip()
    if not line:
        return None

    parts = line.split(' ', 1)
    if len(parts) != 2:
        return None

    checksum, path = parts
    # Text mode uses two spaces, binary mode ' *'
    if path.startswith(' ') or path.startswith('*'):
        path = path[1:]
    if not path or len(checksum) != 32:
        return None

    return checksum.lower(), path


async def write_checksum_file(file_path: Path, checksum_file: Path) -> str:
    """
    Compute the MD5 of a file and record it in md5sum format

    Args:
        file_path: File to hash
        checksum_file: Sidecar file to (over)write

    Returns:
        Hex digest string
    """
    checksum = await calculate_file_hash_async(file_path, "md5")
    async with aiofiles.open(checksum_file, 'w') as f:
        await f.write(format_checksum_line(checksum, file_path))
    return checksum


async def verify_checksum_file(checksum_file: Path) -> bool:
    """
    Verify every record of an md5sum file, like `md5sum -c`

    Args:
        checksum_file: Sidecar file

    Returns:
        True if the file has at least one record and all records match
    """
    if not checksum_file.exists():
        logger.debug(f"The checksum file is not found: {checksum_file}")
        return False

    async with aiofiles.open(checksum_file, 'r') as f:
        content = await f.read()

    records = [r for r in (parse_checksum_line(line) for line in content.splitlines()) if r]
    if not records:
        logger.debug(f"The checksum file has no records: {checksum_file}")
        return False

    for expected, path in records:
        target = Path(path)
        if not target.exists():
            logger.debug(f"Checksummed file is missing: {target}")
            return False
        actual = await calculate_file_hash_async(target, "md5")
        if actual != expected:
            logger.debug(f"Checksum mismatch for {target}")
            return False

    return True
