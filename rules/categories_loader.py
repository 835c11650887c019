import os
import logging
import yaml
from typing import Dict, Optional

from core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_TABLE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "builtwith_categories.yaml")


def load_category_table(path: Optional[str] = None) -> Dict[str, str]:
    """
    Loads a category code -> category name table from a YAML file.

    The file holds a single ``categories`` mapping; codes may be written as
    integers or strings and are normalized to strings.
    """
    path = path or DEFAULT_CATEGORY_TABLE
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load category table {path}: {e}", details={"path": path})

    raw = data.get("categories") if isinstance(data, dict) else None
    if not isinstance(raw, dict):
        raise ConfigError(f"Category table {path} must define a 'categories' mapping", details={"path": path})

    table: Dict[str, str] = {}
    for code, name in raw.items():
        if not isinstance(name, str) or not name:
            raise ConfigError(f"Category {code} in {path} has no name", details={"path": path})
        table[str(code)] = name

    logger.debug(f"Loaded {len(table)} categories from {path}")
    return table
