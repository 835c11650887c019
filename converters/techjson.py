"""Convert a Wappalyzer-style technologies.json into per-category rulesets.

Categories are resolved through the ``categories`` dictionary of the input
document itself; one ``detect-<category>-ruleset.yaml`` file per category.
"""
import argparse
import logging
import sys
from typing import Dict, List, Optional

from core import cli
from core.bucketer import CategoryBucketer
from core.emitter import RulesetEmitter
from core.naming import category_filenames
from core.normalizer import RuleNormalizer
from core.ruleset_validator import report
from core.settings import ConverterSettings
from models.ruleset import Ruleset
from models.sources import TechJSONDocument
from sources.techjson import read_techjson

logger = logging.getLogger(__name__)


def build_rulesets(document: TechJSONDocument, settings: Optional[ConverterSettings] = None) -> Dict[str, Ruleset]:
    """Category name -> Ruleset for every category at least one technology resolves to."""
    settings = settings or ConverterSettings()
    normalizer = RuleNormalizer(confidence=settings.confidence)
    bucketer = CategoryBucketer(
        settings,
        group_name_for=lambda category: f"detect_web_technologies_{category}",
    )

    for name in sorted(document.technologies):
        record = document.technologies[name]
        rule = normalizer.from_techjson(record)
        resolved = []
        for code in record.categories:
            category = document.categories.get(code)
            if category is None:
                logger.debug(f"{name}: unknown category {code}")
            resolved.append(category)
        bucketer.add(rule, resolved)

    return bucketer.rulesets()


def convert(
    source: str,
    output_dir: str,
    settings: Optional[ConverterSettings] = None,
    verify: bool = False,
) -> List[str]:
    document = read_techjson(source)
    rulesets = build_rulesets(document, settings)
    report(list(rulesets.values()))
    filenames = category_filenames(rulesets)
    documents = {filenames[category]: ruleset for category, ruleset in rulesets.items()}
    return RulesetEmitter(output_dir, verify=verify).publish(documents)


def _convert_args(args: argparse.Namespace, settings: ConverterSettings) -> List[str]:
    return convert(args.source, args.output, settings, verify=args.verify)


def main(argv: Optional[List[str]] = None) -> int:
    parser = cli.build_parser(
        description="Convert a Wappalyzer technologies.json into detection rulesets",
        source_help="Path to the technologies.json file",
    )
    return cli.run(parser, _convert_args, argv)


if __name__ == "__main__":
    sys.exit(main())
