"""YAML serialization and publishing of rulesets.

All documents of a run are first written into a scratch directory inside the
output directory and only then renamed into place, so a failed run never
leaves a half-updated rule directory behind.
"""
import logging
import os
import shutil
import tempfile
import yaml
from typing import Dict, List

from core.exceptions import InputDecodeError, OutputWriteError, VerificationError
from models.ruleset import Ruleset

logger = logging.getLogger(__name__)


class IndentedDumper(yaml.SafeDumper):
    """SafeDumper that indents block sequences under their parent key."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


def dump_ruleset(ruleset: Ruleset) -> str:
    return yaml.dump(
        ruleset.to_dict(),
        Dumper=IndentedDumper,
        indent=2,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=1000,
    )


def load_ruleset_text(text: str, source: str = "<string>") -> Ruleset:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InputDecodeError(source, str(e))
    if not isinstance(data, dict):
        raise InputDecodeError(source, "ruleset document must be a mapping")
    return Ruleset.from_dict(data)


def load_ruleset(path: str) -> Ruleset:
    with open(path, "r", encoding="utf-8") as f:
        return load_ruleset_text(f.read(), path)


class RulesetEmitter:
    def __init__(self, output_dir: str = "./", verify: bool = False):
        self.output_dir = output_dir
        self.verify = verify

    def publish(self, documents: Dict[str, Ruleset]) -> List[str]:
        """
        Write every ruleset and move them into the output directory.

        With verify set, every staged file is decoded again and compared with
        its Ruleset before anything is moved into place.

        Args:
            documents: Mapping of target filename -> Ruleset

        Returns:
            List of published file paths
        """
        try:
            os.makedirs(self.output_dir, exist_ok=True)
            staging = tempfile.mkdtemp(prefix=".rulesets-", dir=self.output_dir)
        except OSError as e:
            raise OutputWriteError(self.output_dir, str(e))

        published: List[str] = []
        try:
            staged = []
            for filename, ruleset in documents.items():
                staged_path = os.path.join(staging, filename)
                logger.info(f"Writing ruleset {ruleset.ruleset_name} ({ruleset.rule_count()} rules) to {filename}")
                try:
                    with open(staged_path, "w", encoding="utf-8") as f:
                        f.write(dump_ruleset(ruleset))
                except OSError as e:
                    raise OutputWriteError(os.path.join(self.output_dir, filename), str(e))
                if self.verify and load_ruleset(staged_path) != ruleset:
                    raise VerificationError(os.path.join(self.output_dir, filename))
                staged.append((staged_path, os.path.join(self.output_dir, filename)))

            for staged_path, target in staged:
                try:
                    os.replace(staged_path, target)
                except OSError as e:
                    raise OutputWriteError(target, str(e))
                published.append(target)
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        return published
