"""Command-line plumbing shared by the converter entry points."""
import argparse
import logging
from typing import Callable, List, Optional

from core.exceptions import ConverterError
from core.settings import load_settings, ConverterSettings


def build_parser(description: str, source_help: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("-i", "-source", "--source", dest="source", required=True, help=source_help)
    parser.add_argument("-o", "-output", "--output", dest="output", default="./", help="Path to the output directory (default: ./)")
    parser.add_argument("--config", type=str, help="YAML file overriding format_version, author and confidence")
    parser.add_argument("--verify", action="store_true", help="Re-read every written ruleset and fail if it does not match")
    parser.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity level (default: INFO)")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, level),
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def run(
    parser: argparse.ArgumentParser,
    convert: Callable[[argparse.Namespace, ConverterSettings], List[str]],
    argv: Optional[List[str]] = None,
) -> int:
    """Parse arguments, run the conversion and map failures to exit code 1."""
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(args.config)
        written = convert(args, settings)
    except ConverterError as e:
        logger.error(f"[{e.error_code}] {e.message}")
        return 1

    logger.info(f"{len(written)} ruleset file(s) generated successfully in {args.output}")
    return 0
