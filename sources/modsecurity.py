"""Reader for ModSecurity rule files.

Rules are scraped line by line with regular expressions; only lines that
carry a ``REQUEST_HEADERS:User-Agent "..."`` match become rules.
"""
import logging
import re
from typing import List

from models.sources import ModSecurityRule
from sources.common import read_lines

logger = logging.getLogger(__name__)

USER_AGENT_RE = re.compile(r'REQUEST_HEADERS:User-Agent "([^"]+)"')
ID_RE = re.compile(r"id:(\d+)")
PHASE_RE = re.compile(r"phase:(\d+)")
ACTION_RE = re.compile(r"\b(deny|allow|log)\b")
STATUS_RE = re.compile(r"status:(\d+)")
MESSAGE_RE = re.compile(r"msg:'([^']+)'")


def _first_group(pattern: re.Pattern, line: str) -> str:
    match = pattern.search(line)
    return match.group(1) if match else ""


def parse_rule_line(line: str) -> ModSecurityRule:
    """Extract every known field from one rule line. Missing fields are empty."""
    return ModSecurityRule(
        id=_first_group(ID_RE, line),
        phase=_first_group(PHASE_RE, line),
        action=_first_group(ACTION_RE, line),
        status=_first_group(STATUS_RE, line),
        message=_first_group(MESSAGE_RE, line),
        user_agent=_first_group(USER_AGENT_RE, line),
    )


def parse_lines(lines: List[str]) -> List[ModSecurityRule]:
    rules: List[ModSecurityRule] = []
    for line_no, line in enumerate(lines, start=1):
        if not line or line.startswith("#"):
            continue
        rule = parse_rule_line(line)
        if not rule.user_agent:
            logger.debug(f"Line {line_no}: no User-Agent match, skipped")
            continue
        if not rule.id:
            logger.warning(f"Line {line_no}: User-Agent rule without an id")
        logger.debug(
            f"Rule {rule.id}: phase={rule.phase or '-'} action={rule.action or '-'} "
            f"status={rule.status or '-'} msg={rule.message or '-'}"
        )
        rules.append(rule)
    return rules


def read_modsecurity(path: str) -> List[ModSecurityRule]:
    rules = parse_lines(read_lines(path))
    logger.info(f"Loaded {len(rules)} User-Agent rules from {path}")
    return rules
