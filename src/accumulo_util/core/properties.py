"""
Readers for the plain-text configuration files found in an Accumulo conf directory.

accumulo.properties is a flat Java properties file; the server lists
(tservers and friends) are one host per line with '#' comments. Both are
read as ISO-8859-1, the default encoding for Java properties files.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Union

from accumulo_util.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

PROPERTIES_ENCODING = "latin-1"


def _logical_lines(lines: Iterable[str]) -> Iterator[str]:
    """Join backslash-continued lines and drop blanks and comments."""
    buffer = None
    for raw in lines:
        line = raw.rstrip("\r\n").lstrip()
        if buffer is None and (not line or line[0] in "#!"):
            continue
        # An odd number of trailing backslashes continues onto the next line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            buffer = (buffer or "") + line[:-1]
            continue
        yield (buffer or "") + line
        buffer = None
    if buffer:
        yield buffer


def _split_property(line: str) -> tuple[str, str]:
    """Split a property line at the first unescaped '=', ':' or whitespace."""
    escaped = False
    for pos, ch in enumerate(line):
        if escaped:
            escaped = False
            continue
        if ch == "\\":
            escaped = True
        elif ch in "=:":
            return line[:pos].strip(), line[pos + 1:].strip()
        elif ch.isspace():
            rest = line[pos:].lstrip()
            if rest[:1] in ("=", ":"):
                rest = rest[1:]
            return line[:pos], rest.strip()
    return line.strip(), ""


def read_properties(path: Union[str, Path]) -> Dict[str, str]:
    """
    Parse a Java properties file.

    Blank lines and lines starting with '#' or '!' are skipped, and lines
    ending in a backslash continue onto the next one. Keys are separated
    from values by the first unescaped '=', ':' or whitespace. Other
    escape sequences are kept verbatim. A repeated key keeps its last value.

    Args:
        path: Properties file to read

    Returns:
        Mapping of property names to values

    Raises:
        ConfigurationError: If the file does not exist or cannot be read
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Properties file not found: {path}")

    properties: Dict[str, str] = {}
    try:
        with open(path, "r", encoding=PROPERTIES_ENCODING) as f:
            for line in _logical_lines(f):
                key, value = _split_property(line)
                if key:
                    properties[key] = value
    except (OSError, UnicodeError) as e:
        raise ConfigurationError(f"Failed to read {path}: {e}") from e

    logger.debug(f"Read {len(properties)} properties from {path}")
    return properties


def get_property(path: Union[str, Path], key: str) -> Optional[str]:
    """Return one property value, or None when it is absent or empty."""
    value = read_properties(path).get(key)
    return value or None


def count_entries(path: Union[str, Path]) -> int:
    """
    Count the non-blank, non-comment lines of a server list file.

    A missing file counts as zero entries.
    """
    path = Path(path)
    if not path.is_file():
        logger.warning(f"Server list {path} not found, assuming no servers")
        return 0

    count = 0
    try:
        with open(path, "r", encoding=PROPERTIES_ENCODING) as f:
            for line in f:
                stripped = line.strip()
                if stripped and not stripped.startswith("#"):
                    count += 1
    except (OSError, UnicodeError) as e:
        raise ConfigurationError(f"Failed to read {path}: {e}") from e
    return count
