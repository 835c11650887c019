"""Reader for favicon MD5 hash databases (Nikto ``db_favicon`` layout).

One quoted, comma-separated row per favicon::

    "nikto_id","md5 hash","description"
    "000001","abc123...","Drupal"

The first line is a header. Comments (``#``) and empty lines are ignored,
a malformed line is logged and skipped.
"""
import csv
import logging
from typing import List, Optional

from models.sources import FaviconRow
from sources.common import read_lines

logger = logging.getLogger(__name__)


def parse_row(line: str, line_no: int = 0) -> Optional[FaviconRow]:
    try:
        fields = next(csv.reader([line], strict=True, skipinitialspace=False))
    except (csv.Error, StopIteration) as e:
        logger.warning(f"Error reading line {line_no}: {e}")
        return None

    if len(fields) != 3:
        logger.warning(f"Skipping invalid line {line_no}: {line}")
        return None

    identifier, md5hash, description = (f.strip('"') for f in fields)
    return FaviconRow(identifier=identifier, md5hash=md5hash, description=description)


def parse_lines(lines: List[str]) -> List[FaviconRow]:
    rows: List[FaviconRow] = []
    # first line is the column header
    for line_no, line in enumerate(lines[1:], start=2):
        if not line or line.startswith("#"):
            continue
        row = parse_row(line, line_no)
        if row:
            rows.append(row)
    return rows


def read_favicon_db(path: str) -> List[FaviconRow]:
    rows = parse_lines(read_lines(path))
    logger.info(f"Loaded {len(rows)} favicon hashes from {path}")
    return rows
