"""Convert BuiltWith-style technology JSON into per-category rulesets.

Category codes are resolved through a YAML category table
(``rules/builtwith_categories.yaml`` unless ``--categories`` is given).
"""
import argparse
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
from models.sources import BuiltWithRecord
from rules.categories_loader import load_category_table
from sources.builtwith import read_builtwith


def build_rulesets(
    technologies: Dict[str, BuiltWithRecord],
    category_table: Dict[str, str],
    settings: Optional[ConverterSettings] = None,
) -> Dict[str, Ruleset]:
    settings = settings or ConverterSettings()
    normalizer = RuleNormalizer(confidence=settings.confidence)
    bucketer = CategoryBucketer(settings, group_name_for=lambda category: "detect_web_technologies")

    for name in sorted(technologies):
        record = technologies[name]
        rule = normalizer.from_builtwith(record)
        bucketer.add(rule, [category_table.get(code) for code in record.categories])

    return bucketer.rulesets()


def convert(
    source: str,
    output_dir: str,
    settings: Optional[ConverterSettings] = None,
    categories_file: Optional[str] = None,
    verify: bool = False,
) -> List[str]:
    category_table = load_category_table(categories_file)
    technologies = read_builtwith(source)
    rulesets = build_rulesets(technologies, category_table, settings)
    report(list(rulesets.values()))
    filenames = category_filenames(rulesets)
    documents = {filenames[category]: ruleset for category, ruleset in rulesets.items()}
    return RulesetEmitter(output_dir, verify=verify).publish(documents)


def _convert_args(args: argparse.Namespace, settings: ConverterSettings) -> List[str]:
    return convert(args.source, args.output, settings, categories_file=args.categories, verify=args.verify)


def main(argv: Optional[List[str]] = None) -> int:
    parser = cli.build_parser(
        description="Convert BuiltWith technologies JSON into detection rulesets",
        source_help="Path to the BuiltWith technologies.json file",
    )
    parser.add_argument("--categories", type=str, help="YAML category table (default: bundled builtwith_categories.yaml)")
    return cli.run(parser, _convert_args, argv)


if __name__ == "__main__":
    sys.exit(main())
