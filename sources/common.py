"""Shared helpers for the input readers.

The third-party formats are loosely typed: the same field may hold a string,
a list or a mapping depending on who wrote the entry. The ``as_*`` helpers
coerce a raw value into the one shape the records use and log a
ShapeMismatchError warning (returning an empty value) for anything else.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from core.exceptions import InputReadError, InputDecodeError, ShapeMismatchError

logger = logging.getLogger(__name__)


def read_bytes(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        raise InputReadError(path, "file not found")
    except OSError as e:
        raise InputReadError(path, str(e))


def read_text(path: str) -> str:
    try:
        return read_bytes(path).decode("utf-8")
    except UnicodeDecodeError as e:
        raise InputReadError(path, str(e))


def decode_lines(data: bytes, source: str = "<memory>") -> List[str]:
    """Split raw content into lines, decoding each one on its own.

    A line that is not valid UTF-8 is logged and replaced by an empty line,
    which keeps line numbers stable and lets line parsers skip it.
    """
    lines: List[str] = []
    for line_no, raw in enumerate(data.splitlines(), start=1):
        try:
            lines.append(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            logger.warning(f"{source}: line {line_no} is not valid UTF-8 ({e.reason}), skipped")
            lines.append("")
    return lines


def read_lines(path: str) -> List[str]:
    return decode_lines(read_bytes(path), path)


def load_json(path: str) -> Any:
    text = read_text(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InputDecodeError(path, e.msg, line=e.lineno)


def warn_shape(error: ShapeMismatchError, owner: Optional[str] = None) -> None:
    if owner:
        logger.warning(f"{owner}: {error.message}; field ignored")
    else:
        logger.warning(f"{error.message}; field ignored")


def as_string(value: Any, field_name: str, owner: Optional[str] = None) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    warn_shape(ShapeMismatchError(field_name, value, "string"), owner)
    return ""


def as_string_list(value: Any, field_name: str, owner: Optional[str] = None) -> List[str]:
    """Accept a string or a list of strings. Non-string list items are dropped."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    warn_shape(ShapeMismatchError(field_name, value, "string or list of strings"), owner)
    return []


def as_string_map(value: Any, field_name: str, owner: Optional[str] = None) -> Dict[str, str]:
    """Accept a mapping of string values. Entries with other value types are dropped."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        warn_shape(ShapeMismatchError(field_name, value, "mapping"), owner)
        return {}
    result: Dict[str, str] = {}
    for key, item in value.items():
        if isinstance(item, str):
            result[str(key)] = item
        else:
            warn_shape(ShapeMismatchError(f"{field_name}.{key}", item, "string"), owner)
    return result


def as_category_codes(value: Any, field_name: str, owner: Optional[str] = None) -> List[str]:
    """Category codes come as ints or numeric strings; both are normalized to str."""
    if value is None:
        return []
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        value = [value]
    if not isinstance(value, list):
        warn_shape(ShapeMismatchError(field_name, value, "list of category codes"), owner)
        return []
    codes: List[str] = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (str, int)):
            warn_shape(ShapeMismatchError(field_name, item, "category code"), owner)
            continue
        codes.append(str(item).strip())
    return codes
