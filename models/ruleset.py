from dataclasses import dataclass, field
from typing import List, Dict, Any

DEFAULT_CONFIDENCE = 10


def _strings(value: Any) -> List[str]:
    if not value:
        return []
    return [str(v) for v in value]


@dataclass
class HTTPHeaderField:
    """Header or cookie match. Cookies share this type in the output schema."""
    key: str
    value: List[str] = field(default_factory=list)
    confidence: float = DEFAULT_CONFIDENCE

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "value": list(self.value), "confidence": self.confidence}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HTTPHeaderField":
        return cls(
            key=data.get("key", ""),
            value=_strings(data.get("value")),
            confidence=data.get("confidence", DEFAULT_CONFIDENCE),
        )


@dataclass
class MetaTag:
    name: str
    content: List[str] = field(default_factory=list)
    confidence: float = DEFAULT_CONFIDENCE

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "content": list(self.content), "confidence": self.confidence}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetaTag":
        return cls(
            name=data.get("name", ""),
            content=_strings(data.get("content")),
            confidence=data.get("confidence", DEFAULT_CONFIDENCE),
        )


@dataclass
class PageContentSignature:
    """Pattern found in the page content (html, scripts, tag attributes, favicon hash)."""
    key: str = ""
    attribute: str = ""  # tag attribute to inspect, e.g. "href"
    value: List[str] = field(default_factory=list)  # literal substrings
    text: List[str] = field(default_factory=list)  # free text
    md5hash: List[str] = field(default_factory=list)
    confidence: float = DEFAULT_CONFIDENCE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"key": self.key}
        if self.attribute:
            data["attribute"] = self.attribute
        if self.value:
            data["value"] = list(self.value)
        if self.text:
            data["text"] = list(self.text)
        if self.md5hash:
            data["md5hash"] = list(self.md5hash)
        data["confidence"] = self.confidence
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageContentSignature":
        return cls(
            key=data.get("key") or "",
            attribute=data.get("attribute") or "",
            value=_strings(data.get("value")),
            text=_strings(data.get("text")),
            md5hash=_strings(data.get("md5hash")),
            confidence=data.get("confidence", DEFAULT_CONFIDENCE),
        )


@dataclass
class SSLSignature:
    """SSL certificate field match. Part of the schema, no converter fills it yet."""
    key: str
    value: List[str] = field(default_factory=list)
    confidence: float = DEFAULT_CONFIDENCE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"key": self.key}
        if self.value:
            data["value"] = list(self.value)
        data["confidence"] = self.confidence
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SSLSignature":
        return cls(
            key=data.get("key", ""),
            value=_strings(data.get("value")),
            confidence=data.get("confidence", DEFAULT_CONFIDENCE),
        )


@dataclass
class URLMicroSignature:
    value: str
    confidence: float = DEFAULT_CONFIDENCE

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "confidence": self.confidence}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "URLMicroSignature":
        return cls(value=data.get("value", ""), confidence=data.get("confidence", DEFAULT_CONFIDENCE))


@dataclass
class DetectionRule:
    """One technology detection unit and its signatures."""
    rule_name: str
    object_name: str
    implies: List[str] = field(default_factory=list)
    http_header_fields: List[HTTPHeaderField] = field(default_factory=list)
    meta_tags: List[MetaTag] = field(default_factory=list)
    page_content_patterns: List[PageContentSignature] = field(default_factory=list)
    ssl_patterns: List[SSLSignature] = field(default_factory=list)
    url_micro_signatures: List[URLMicroSignature] = field(default_factory=list)

    def signature_count(self) -> int:
        return (
            len(self.http_header_fields)
            + len(self.meta_tags)
            + len(self.page_content_patterns)
            + len(self.ssl_patterns)
            + len(self.url_micro_signatures)
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"rule_name": self.rule_name, "object_name": self.object_name}
        if self.implies:
            data["implies"] = list(self.implies)
        # Empty signature lists are left out of the document
        for key in ("http_header_fields", "meta_tags", "page_content_patterns",
                    "ssl_patterns", "url_micro_signatures"):
            signatures = getattr(self, key)
            if signatures:
                data[key] = [s.to_dict() for s in signatures]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectionRule":
        return cls(
            rule_name=data.get("rule_name", ""),
            object_name=data.get("object_name", ""),
            implies=_strings(data.get("implies")),
            http_header_fields=[HTTPHeaderField.from_dict(d) for d in data.get("http_header_fields") or []],
            meta_tags=[MetaTag.from_dict(d) for d in data.get("meta_tags") or []],
            page_content_patterns=[PageContentSignature.from_dict(d) for d in data.get("page_content_patterns") or []],
            ssl_patterns=[SSLSignature.from_dict(d) for d in data.get("ssl_patterns") or []],
            url_micro_signatures=[URLMicroSignature.from_dict(d) for d in data.get("url_micro_signatures") or []],
        )


@dataclass
class RuleGroup:
    group_name: str
    is_enabled: bool = True
    detection_rules: List[DetectionRule] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_name": self.group_name,
            "is_enabled": self.is_enabled,
            "detection_rules": [r.to_dict() for r in self.detection_rules],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuleGroup":
        return cls(
            group_name=data.get("group_name", ""),
            is_enabled=bool(data.get("is_enabled", True)),
            detection_rules=[DetectionRule.from_dict(d) for d in data.get("detection_rules") or []],
        )


@dataclass
class Ruleset:
    """Top-level YAML document: metadata plus one or more rule groups."""
    ruleset_name: str
    format_version: str
    author: str
    created_at: str  # RFC3339
    description: str
    rule_groups: List[RuleGroup] = field(default_factory=list)

    def rule_count(self) -> int:
        return sum(len(g.detection_rules) for g in self.rule_groups)

    def all_rules(self) -> List[DetectionRule]:
        return [r for g in self.rule_groups for r in g.detection_rules]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ruleset_name": self.ruleset_name,
            "format_version": self.format_version,
            "author": self.author,
            "created_at": self.created_at,
            "description": self.description,
            "rule_groups": [g.to_dict() for g in self.rule_groups],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ruleset":
        return cls(
            ruleset_name=data.get("ruleset_name", ""),
            format_version=str(data.get("format_version", "")),
            author=data.get("author", ""),
            created_at=str(data.get("created_at", "")),
            description=data.get("description", ""),
            rule_groups=[RuleGroup.from_dict(g) for g in data.get("rule_groups") or []],
        )
