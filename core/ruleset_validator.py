"""
Consistency checks over generated rulesets: duplicated rule names and header
keys claimed by several technologies. Findings are reported, never fatal.
"""
import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from models.ruleset import Ruleset

logger = logging.getLogger(__name__)


def find_duplicate_rule_names(ruleset: Ruleset) -> Dict[str, int]:
    """
    Detect rule names occurring more than once in a ruleset.

    Returns:
        Dictionary with rule names as keys and occurrence counts as values
    """
    counts: Dict[str, int] = defaultdict(int)
    for rule in ruleset.all_rules():
        counts[rule.rule_name] += 1
    return {name: count for name, count in counts.items() if count > 1}


def find_header_overlaps(rulesets: Iterable[Ruleset]) -> Dict[str, List[str]]:
    """
    Detect header keys used by more than one technology.

    A technology present in several category rulesets is only counted once.

    Returns:
        Dictionary with header keys as keys and sorted object names as values
    """
    headers_map: Dict[str, set] = defaultdict(set)
    for ruleset in rulesets:
        for rule in ruleset.all_rules():
            for header in rule.http_header_fields:
                headers_map[header.key].add(rule.object_name)

    return {
        header: sorted(objects)
        for header, objects in headers_map.items()
        if len(objects) > 1
    }


def summarize(rulesets: Iterable[Ruleset]) -> Dict[str, Dict[str, int]]:
    """Per-ruleset rule and signature counts."""
    summary = {}
    for ruleset in rulesets:
        rules = ruleset.all_rules()
        summary[ruleset.ruleset_name] = {
            "rules": len(rules),
            "signatures": sum(r.signature_count() for r in rules),
        }
    return summary


def report(rulesets: List[Ruleset]) -> None:
    """Log validation findings and a summary line."""
    for ruleset in rulesets:
        for name, count in sorted(find_duplicate_rule_names(ruleset).items()):
            logger.warning(f"{ruleset.ruleset_name}: rule '{name}' defined {count} times")

    overlaps = find_header_overlaps(rulesets)
    for header, objects in sorted(overlaps.items()):
        logger.debug(f"Header '{header}' shared by: {', '.join(objects)}")
    if overlaps:
        logger.info(f"{len(overlaps)} header keys are shared by several technologies")

    summary = summarize(rulesets)
    total_rules = sum(s["rules"] for s in summary.values())
    total_signatures = sum(s["signatures"] for s in summary.values())
    logger.info(f"Generated {len(summary)} rulesets, {total_rules} rules, {total_signatures} signatures")
