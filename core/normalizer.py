"""Normalization of source records into DetectionRule objects.

Every ``from_*`` method maps exactly one source record to one rule and never
raises on a malformed optional field: the field is logged as a warning and
contributes nothing to the rule.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, List

from core.exceptions import ShapeMismatchError
from core.naming import format_rule_name
from models.ruleset import (
    DEFAULT_CONFIDENCE,
    DetectionRule,
    HTTPHeaderField,
    MetaTag,
    PageContentSignature,
    URLMicroSignature,
)
from models.sources import BuiltWithRecord, FaviconRow, ModSecurityRule, TechJSONRecord

logger = logging.getLogger(__name__)

# (tag, attribute) pairs a technology's website is looked up in
WEBSITE_LOCATIONS = (("a", "href"), ("link", "href"), ("script", "src"))


@dataclass(frozen=True)
class MetaEntry:
    name: str
    content: List[str]


@dataclass
class MetaParseResult:
    entries: List[MetaEntry] = field(default_factory=list)
    errors: List[ShapeMismatchError] = field(default_factory=list)


def parse_meta(raw: Any) -> MetaParseResult:
    """Resolve the polymorphic ``meta`` field of a technologies.json entry.

    - ``{"generator": "WordPress"}`` -> one entry with a single content value
    - ``{"generator": ["a", "b"]}`` -> one entry holding every string item
    - any other value for a key, or a non-mapping ``meta`` -> a ShapeMismatchError
    """
    result = MetaParseResult()
    if raw is None:
        return result
    if not isinstance(raw, dict):
        result.errors.append(ShapeMismatchError("meta", raw, "mapping"))
        return result

    for name in sorted(raw):
        value = raw[name]
        if isinstance(value, str):
            result.entries.append(MetaEntry(name=name, content=[value]))
        elif isinstance(value, list):
            result.entries.append(
                MetaEntry(name=name, content=[v for v in value if isinstance(v, str)])
            )
        else:
            result.errors.append(ShapeMismatchError(f"meta.{name}", value, "string or list"))
    return result


class RuleNormalizer:
    """Builds DetectionRule objects; every signature gets the same confidence."""

    def __init__(self, confidence: float = DEFAULT_CONFIDENCE):
        self.confidence = confidence

    def _header(self, key: str, value: str) -> HTTPHeaderField:
        return HTTPHeaderField(key=key, value=[value], confidence=self.confidence)

    def _url(self, value: str) -> URLMicroSignature:
        return URLMicroSignature(value=value, confidence=self.confidence)

    def from_techjson(self, record: TechJSONRecord) -> DetectionRule:
        rule = DetectionRule(
            rule_name=format_rule_name(record.name),
            object_name=record.name,
            implies=list(record.implies),
        )

        # Headers and cookies end up in the same signature list
        for key in sorted(record.headers):
            rule.http_header_fields.append(self._header(key, record.headers[key]))
        for key in sorted(record.cookies):
            rule.http_header_fields.append(self._header(key, record.cookies[key]))

        meta = parse_meta(record.meta)
        for error in meta.errors:
            logger.warning(f"{record.name}: {error.message}; ignored")
        for entry in meta.entries:
            rule.meta_tags.append(
                MetaTag(name=entry.name, content=list(entry.content), confidence=self.confidence)
            )

        for pattern in record.html:
            rule.page_content_patterns.append(
                PageContentSignature(key="html", value=[pattern], confidence=self.confidence)
            )
        for pattern in record.scripts:
            rule.page_content_patterns.append(
                PageContentSignature(key="script", value=[pattern], confidence=self.confidence)
            )

        for pattern in record.url:
            rule.url_micro_signatures.append(self._url(pattern))

        if record.website:
            rule.url_micro_signatures.append(self._url(record.website))
            for tag, attribute in WEBSITE_LOCATIONS:
                rule.page_content_patterns.append(
                    PageContentSignature(
                        key=tag,
                        attribute=attribute,
                        value=[record.website],
                        confidence=self.confidence,
                    )
                )

        return rule

    def from_builtwith(self, record: BuiltWithRecord) -> DetectionRule:
        rule = DetectionRule(
            rule_name=format_rule_name(record.name),
            object_name=record.name,
            implies=list(record.implies),
        )

        for key in sorted(record.headers):
            rule.http_header_fields.append(self._header(key, record.headers[key]))

        if record.html:
            rule.page_content_patterns.append(
                PageContentSignature(key="body", text=[record.html], confidence=self.confidence)
            )

        if record.url:
            rule.url_micro_signatures.append(self._url(record.url))

        return rule

    def from_favicon(self, row: FaviconRow) -> DetectionRule:
        return DetectionRule(
            rule_name=format_rule_name(row.description),
            object_name=row.description,
            page_content_patterns=[
                PageContentSignature(md5hash=[row.md5hash], confidence=self.confidence)
            ],
        )

    def from_modsecurity(self, modsec_rule: ModSecurityRule) -> DetectionRule:
        # rule_name keeps the bare prefix for id-less rules; object_name says so
        object_name = f"ModSecurity Rule {modsec_rule.id}" if modsec_rule.id else "ModSecurity Rule (no id)"
        return DetectionRule(
            rule_name=f"detect_modsec_rule_{modsec_rule.id}",
            object_name=object_name,
            http_header_fields=[self._header("User-Agent", modsec_rule.user_agent)],
        )
