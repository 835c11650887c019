"""Category bucketing: fans detection rules out into one Ruleset per category."""
import copy
import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, Optional

from core.settings import ConverterSettings
from models.ruleset import DetectionRule, RuleGroup, Ruleset

logger = logging.getLogger(__name__)


def now_rfc3339() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def single_ruleset(
    ruleset_name: str,
    group_name: str,
    description: str,
    settings: Optional[ConverterSettings] = None,
    rules: Iterable[DetectionRule] = (),
    created_at: Optional[str] = None,
) -> Ruleset:
    """Build a Ruleset holding exactly one enabled RuleGroup."""
    settings = settings or ConverterSettings()
    return Ruleset(
        ruleset_name=ruleset_name,
        format_version=settings.format_version,
        author=settings.author,
        created_at=created_at or now_rfc3339(),
        description=description,
        rule_groups=[RuleGroup(group_name=group_name, is_enabled=True, detection_rules=list(rules))],
    )


class CategoryBucketer:
    """Groups rules into per-category rulesets.

    Each bucket is created on first use and holds a single RuleGroup whose name
    comes from ``group_name_for(category)``. Rules are deep-copied into every
    bucket so the per-category documents never share signature objects.
    """

    def __init__(
        self,
        settings: Optional[ConverterSettings] = None,
        group_name_for: Callable[[str], str] = lambda category: "detect_web_technologies",
        created_at: Optional[str] = None,
    ):
        self.settings = settings or ConverterSettings()
        self.group_name_for = group_name_for
        self.created_at = created_at or now_rfc3339()
        self._buckets: Dict[str, Ruleset] = {}

    def _bucket(self, category: str) -> Ruleset:
        if category not in self._buckets:
            self._buckets[category] = single_ruleset(
                ruleset_name=f"detect_{category.replace(' ', '_')}_ruleset",
                group_name=self.group_name_for(category),
                description=f"Ruleset to detect {category.replace('_', ' ')} technologies.",
                settings=self.settings,
                created_at=self.created_at,
            )
            logger.debug(f"Created bucket for category '{category}'")
        return self._buckets[category]

    def add(self, rule: DetectionRule, categories: Iterable[Optional[str]]) -> int:
        """Append rule to every resolved category; None entries are unresolved and skipped.

        Returns the number of buckets the rule landed in.
        """
        placed = 0
        for category in categories:
            if not category:
                continue
            ruleset = self._bucket(category)
            ruleset.rule_groups[0].detection_rules.append(copy.deepcopy(rule))
            placed += 1
        if not placed:
            logger.debug(f"{rule.rule_name}: no known category, dropped")
        return placed

    def rulesets(self) -> Dict[str, Ruleset]:
        """Category name -> Ruleset, in order of first use."""
        return dict(self._buckets)
