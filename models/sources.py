from dataclasses import dataclass, field
from typing import List, Dict, Any


@dataclass(frozen=True)
class TechJSONRecord:
    """One entry of a Wappalyzer-style technologies.json."""
    name: str
    categories: List[str] = field(default_factory=list)  # codes, normalized to str
    cookies: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    meta: Any = None  # raw; shape is resolved by the normalizer
    html: List[str] = field(default_factory=list)
    scripts: List[str] = field(default_factory=list)
    url: List[str] = field(default_factory=list)
    website: str = ""
    implies: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class TechJSONDocument:
    technologies: Dict[str, TechJSONRecord] = field(default_factory=dict)
    categories: Dict[str, str] = field(default_factory=dict)  # code -> category name


@dataclass(frozen=True)
class BuiltWithRecord:
    """One entry of a BuiltWith-style technologies file."""
    name: str
    categories: List[str] = field(default_factory=list)
    url: str = ""
    html: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    implies: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FaviconRow:
    identifier: str
    md5hash: str
    description: str


@dataclass(frozen=True)
class ModSecurityRule:
    """Fields scraped from a single ModSecurity rule line. Empty string when absent."""
    id: str = ""
    phase: str = ""
    action: str = ""
    status: str = ""
    message: str = ""
    user_agent: str = ""
