"""Convert ModSecurity User-Agent rules into a single ruleset."""
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
from models.sources import ModSecurityRule
from sources.modsecurity import read_modsecurity

OUTPUT_FILENAME = "detect-modsecurity-ruleset.yaml"


def build_ruleset(modsec_rules: List[ModSecurityRule], settings: Optional[ConverterSettings] = None) -> Ruleset:
    settings = settings or ConverterSettings()
    normalizer = RuleNormalizer(confidence=settings.confidence)
    return single_ruleset(
        ruleset_name="detect_modsecurity_rules",
        group_name="detect_modsecurity_rules",
        description="Ruleset to detect ModSecurity rules.",
        settings=settings,
        rules=[normalizer.from_modsecurity(r) for r in modsec_rules if r.user_agent],
    )


def convert(
    source: str,
    output_dir: str,
    settings: Optional[ConverterSettings] = None,
    verify: bool = False,
) -> List[str]:
    ruleset = build_ruleset(read_modsecurity(source), settings)
    report([ruleset])
    return RulesetEmitter(output_dir, verify=verify).publish({OUTPUT_FILENAME: ruleset})


def _convert_args(args: argparse.Namespace, settings: ConverterSettings) -> List[str]:
    return convert(args.source, args.output, settings, verify=args.verify)


def main(argv: Optional[List[str]] = None) -> int:
    parser = cli.build_parser(
        description="Convert ModSecurity rules into a detection ruleset",
        source_help="Path to the ModSecurity rules file",
    )
    return cli.run(parser, _convert_args, argv)


if __name__ == "__main__":
    sys.exit(main())
