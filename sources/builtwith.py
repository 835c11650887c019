"""Reader for BuiltWith-style technology JSON.

Expected layout::

    {
      "technologies": {
        "Drupal": {
          "categories": [1],
          "patterns": {"url": "...", "html": "...", "headers": {"X-Generator": "Drupal"}},
          "implies": ["PHP"]
        }
      }
    }
"""
import logging
from typing import Any, Dict

from core.exceptions import InputDecodeError, ShapeMismatchError
from models.sources import BuiltWithRecord
from sources.common import load_json, as_string, as_string_list, as_string_map, as_category_codes, warn_shape

logger = logging.getLogger(__name__)


def parse_technology(name: str, details: Dict[str, Any]) -> BuiltWithRecord:
    patterns = details.get("patterns") or {}
    if not isinstance(patterns, dict):
        warn_shape(ShapeMismatchError("patterns", patterns, "object"), name)
        patterns = {}

    return BuiltWithRecord(
        name=name,
        categories=as_category_codes(details.get("categories"), "categories", name),
        url=as_string(patterns.get("url"), "patterns.url", name),
        html=as_string(patterns.get("html"), "patterns.html", name),
        headers=as_string_map(patterns.get("headers"), "patterns.headers", name),
        implies=as_string_list(details.get("implies"), "implies", name),
    )


def parse_document(data: Any, path: str = "<memory>") -> Dict[str, BuiltWithRecord]:
    if not isinstance(data, dict):
        raise InputDecodeError(path, "top-level JSON value must be an object")

    raw_technologies = data.get("technologies")
    if raw_technologies is None:
        raw_technologies = {}
    if not isinstance(raw_technologies, dict):
        raise InputDecodeError(path, "'technologies' must be an object")

    technologies: Dict[str, BuiltWithRecord] = {}
    for name, details in raw_technologies.items():
        if not isinstance(details, dict):
            warn_shape(ShapeMismatchError(f"technologies.{name}", details, "object"))
            continue
        technologies[name] = parse_technology(name, details)
    return technologies


def read_builtwith(path: str) -> Dict[str, BuiltWithRecord]:
    technologies = parse_document(load_json(path), path)
    logger.info(f"Loaded {len(technologies)} BuiltWith technologies from {path}")
    return technologies
