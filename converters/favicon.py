"""Convert a favicon MD5 database into a single ruleset."""
import argparse
import sys
from typing import List, Optional

from core import cli
from core.bucketer import single_ruleset
from core.emitter import RulesetEmitter
from core.normalizer import RuleNormalizer
from core.ruleset_validator import report
from core.settings import ConverterSettings
from models.ruleset import Ruleset
from models.sources import FaviconRow
from sources.favicon import read_favicon_db

OUTPUT_FILENAME = "detect-favicon-hashes-ruleset.yaml"


def build_ruleset(rows: List[FaviconRow], settings: Optional[ConverterSettings] = None) -> Ruleset:
    settings = settings or ConverterSettings()
    normalizer = RuleNormalizer(confidence=settings.confidence)
    return single_ruleset(
        ruleset_name="detect_favicon_hashes",
        group_name="detect_favicon_technologies",
        description="Ruleset to detect technologies using favicon MD5 hashes.",
        settings=settings,
        rules=[normalizer.from_favicon(row) for row in rows],
    )


def convert(
    source: str,
    output_dir: str,
    settings: Optional[ConverterSettings] = None,
    verify: bool = False,
) -> List[str]:
    ruleset = build_ruleset(read_favicon_db(source), settings)
    report([ruleset])
    return RulesetEmitter(output_dir, verify=verify).publish({OUTPUT_FILENAME: ruleset})


def _convert_args(args: argparse.Namespace, settings: ConverterSettings) -> List[str]:
    return convert(args.source, args.output, settings, verify=args.verify)


def main(argv: Optional[List[str]] = None) -> int:
    parser = cli.build_parser(
        description="Convert a favicon MD5 hash database into a detection ruleset",
        source_help="Path to the db_favicon file",
    )
    return cli.run(parser, _convert_args, argv)


if __name__ == "__main__":
    sys.exit(main())
