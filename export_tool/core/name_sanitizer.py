"""Name sanitizing for directories, volumes and compose services

Display names arrive as escaped text such as ``2048\\u5e94\\u7528``. They are
decoded to ``2048应用`` for directory names, and transliterated to
``2048yingyong`` where a strict ``[A-Za-z0-9._-]`` identifier is required.
"""

import logging
import re
import uuid
from typing import Dict, Iterable, Iterator, List, Optional

from pypinyin import lazy_pinyin

from ..constants import (
    CJK_RANGES,
    ESCAPED_CODE_POINT_PATTERN,
    IDENTIFIER_PATTERN,
    NAME_SUFFIX_LENGTH,
)
from ..models.manifest import Component

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")


def sanitize(raw: str) -> str:
    """
    Decode escaped code points and trim surrounding whitespace

    Escaped UTF-16 surrogate pairs are joined into one character, unpaired
    surrogates become U+FFFD.

    Args:
        raw: Escaped display name

    Returns:
        Decoded name
    """
    if not raw:
        return ""
    decoded = ESCAPED_CODE_POINT_PATTERN.sub(lambda m: chr(int(m.group(1), 16)), raw)
    decoded = decoded.encode('utf-16-le', 'surrogatepass').decode('utf-16-le', 'replace')
    return decoded.strip()


def is_cjk(char: str) -> bool:
    code = ord(char)
    return any(low <= code <= high for low, high in CJK_RANGES)


def is_allowed_char(char: str) -> bool:
    return len(char) == 1 and IDENTIFIER_PATTERN.fullmatch(char) is not None


def is_valid_identifier(name: str) -> bool:
    """Check a name against [A-Za-z0-9._-]+"""
    return bool(name) and IDENTIFIER_PATTERN.fullmatch(name) is not None


def _romanize(char: str) -> str:
    try:
        syllables = lazy_pinyin(char, errors='ignore')
    except Exception as e:
        logger.warning(f"Failed to romanize {char!r}: {e}")
        return ""
    romanized = "".join(syllables)
    if not is_valid_identifier(romanized):
        return ""
    return romanized


def to_identifier(name: str) -> str:
    """
    Convert a display name to a [A-Za-z0-9._-] identifier

    CJK ideographs become pinyin, every other disallowed character becomes
    a single underscore.

    Args:
        name: Escaped or decoded display name

    Returns:
        Identifier string
    """
    text = sanitize(name)
    result = []
    for char in text:
        if is_cjk(char):
            romanized = _romanize(char)
            result.append(romanized or "_")
            continue
        result.append(char if is_allowed_char(char) else "_")

    identifier = "".join(result) or "_"
    logger.debug(f"convert {text} to identifier {identifier}")
    return identifier


def flatten_file_name(reference: str) -> str:
    """
    Turn an image reference or remote path into a flat file name

    goodrain.me/percona-mysql:5.5_latest -> percona-mysql--5.5_latest

    Args:
        reference: Image reference or path

    Returns:
        File name without directories, colons or whitespace
    """
    if not reference:
        return reference

    last = reference.split("/")[-1]
    if last == "":
        name = reference.replace("/", "---")
    else:
        name = last

    name = name.replace(":", "--")
    return _WHITESPACE.sub("", name)


def _random_suffix() -> str:
    return uuid.uuid4().hex[:NAME_SUFFIX_LENGTH]


class ServiceNameRegistry:
    """Share id -> unique sanitized name, built once per export"""

    def __init__(self, names: Optional[Dict[str, str]] = None):
        self._names: Dict[str, str] = dict(names or {})

    @classmethod
    def build(cls, components: Iterable[Component]) -> 'ServiceNameRegistry':
        """
        Assign every component a unique identifier in one pass

        Later components whose identifier is already taken get a
        random ``-xxxx`` suffix.

        Args:
            components: Components in manifest order

        Returns:
            Populated registry
        """
        names: Dict[str, str] = {}
        taken = set()
        for component in components:
            name = to_identifier(component.name)
            if name in taken:
                candidate = f"{name}-{_random_suffix()}"
                while candidate in taken:
                    candidate = f"{name}-{_random_suffix()}"
                logger.debug(f"service name {name} already used, renamed to {candidate}")
                name = candidate
            taken.add(name)
            if component.share_id in names:
                logger.warning(f"duplicate share id {component.share_id}, keeping last name {name}")
            names[component.share_id] = name
        return cls(names)

    def get(self, share_id: str) -> Optional[str]:
        return self._names.get(share_id)

    def names(self) -> List[str]:
        return list(self._names.values())

    def items(self):
        return self._names.items()

    def __contains__(self, share_id: object) -> bool:
        return share_id in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)
