"""Reader for Wappalyzer-style technologies.json files.

Expected layout::

    {
      "technologies": {"WordPress": {"cats": [1], "headers": {...}, ...}},
      "categories": {"1": {"name": "CMS"}}
    }
"""
import logging
from typing import Any, Dict

from core.exceptions import InputDecodeError, ShapeMismatchError
from models.sources import TechJSONDocument, TechJSONRecord
from sources.common import (
    load_json,
    as_string,
    as_string_list,
    as_string_map,
    as_category_codes,
    warn_shape,
)

logger = logging.getLogger(__name__)


def parse_technology(name: str, details: Dict[str, Any]) -> TechJSONRecord:
    return TechJSONRecord(
        name=name,
        categories=as_category_codes(details.get("cats"), "cats", name),
        cookies=as_string_map(details.get("cookies"), "cookies", name),
        headers=as_string_map(details.get("headers"), "headers", name),
        meta=details.get("meta"),
        html=as_string_list(details.get("html"), "html", name),
        scripts=as_string_list(details.get("scripts"), "scripts", name),
        url=as_string_list(details.get("url"), "url", name),
        website=as_string(details.get("website"), "website", name),
        implies=as_string_list(details.get("implies"), "implies", name),
    )


def parse_categories(raw: Any) -> Dict[str, str]:
    categories: Dict[str, str] = {}
    if raw is None:
        return categories
    if not isinstance(raw, dict):
        warn_shape(ShapeMismatchError("categories", raw, "mapping"))
        return categories
    for code, entry in raw.items():
        if isinstance(entry, dict) and isinstance(entry.get("name"), str):
            categories[str(code)] = entry["name"]
        else:
            warn_shape(ShapeMismatchError(f"categories.{code}", entry, "object with a name"))
    return categories


def parse_document(data: Any, path: str = "<memory>") -> TechJSONDocument:
    if not isinstance(data, dict):
        raise InputDecodeError(path, "top-level JSON value must be an object")

    raw_technologies = data.get("technologies")
    if raw_technologies is None:
        raw_technologies = {}
    if not isinstance(raw_technologies, dict):
        raise InputDecodeError(path, "'technologies' must be an object")

    technologies: Dict[str, TechJSONRecord] = {}
    for name, details in raw_technologies.items():
        if not isinstance(details, dict):
            warn_shape(ShapeMismatchError(f"technologies.{name}", details, "object"))
            continue
        technologies[name] = parse_technology(name, details)

    return TechJSONDocument(
        technologies=technologies,
        categories=parse_categories(data.get("categories")),
    )


def read_techjson(path: str) -> TechJSONDocument:
    document = parse_document(load_json(path), path)
    logger.info(f"Loaded {len(document.technologies)} technologies and {len(document.categories)} categories from {path}")
    return document
