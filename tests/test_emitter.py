import dataclasses
import os

import pytest
import yaml

from core.bucketer import single_ruleset
from core.emitter import RulesetEmitter, dump_ruleset, load_ruleset, load_ruleset_text
from core.exceptions import OutputWriteError, InputDecodeError, VerificationError
from core.normalizer import RuleNormalizer
from models.ruleset import DetectionRule, SSLSignature
from models.sources import FaviconRow


@pytest.fixture
def wordpress_ruleset(wordpress_record):
    rule = RuleNormalizer().from_techjson(wordpress_record)
    return single_ruleset(
        ruleset_name="detect_CMS_ruleset",
        group_name="detect_web_technologies_CMS",
        description="Ruleset to detect CMS technologies.",
        rules=[rule],
    )


def test_dump_field_order_and_indentation(wordpress_ruleset):
    text = dump_ruleset(wordpress_ruleset)
    lines = text.splitlines()

    top_keys = [line.split(":")[0] for line in lines if line and not line.startswith(" ")]
    assert top_keys == ["ruleset_name", "format_version", "author", "created_at", "description", "rule_groups"]
    assert "  - group_name: detect_web_technologies_CMS" in lines
    assert "    is_enabled: true" in lines
    assert "      - rule_name: detect_wordpress" in lines


def test_dump_omits_empty_signature_lists():
    ruleset = single_ruleset("r", "g", "d", rules=[DetectionRule(rule_name="detect_x", object_name="X")])
    data = yaml.safe_load(dump_ruleset(ruleset))
    rule = data["rule_groups"][0]["detection_rules"][0]
    assert rule == {"rule_name": "detect_x", "object_name": "X"}


def test_dump_keeps_scalar_types(wordpress_ruleset):
    data = yaml.safe_load(dump_ruleset(wordpress_ruleset))
    assert data["format_version"] == "1.0.4"
    assert isinstance(data["created_at"], str)
    header = data["rule_groups"][0]["detection_rules"][0]["http_header_fields"][0]
    assert header["confidence"] == 10


def test_round_trip(wordpress_ruleset):
    assert load_ruleset_text(dump_ruleset(wordpress_ruleset)) == wordpress_ruleset


def test_round_trip_with_every_signature_type(wordpress_ruleset):
    rule = wordpress_ruleset.rule_groups[0].detection_rules[0]
    rule.ssl_patterns.append(SSLSignature(key="issuer", value=["Let's Encrypt"]))
    rule.page_content_patterns.extend(
        RuleNormalizer().from_favicon(FaviconRow("1", "abc123", "Drupal")).page_content_patterns
    )
    assert load_ruleset_text(dump_ruleset(wordpress_ruleset)) == wordpress_ruleset


def test_load_rejects_non_mapping():
    with pytest.raises(InputDecodeError):
        load_ruleset_text("- a\n- b\n")


def test_publish_writes_files(tmp_path, wordpress_ruleset):
    out = tmp_path / "out"
    written = RulesetEmitter(str(out)).publish({"detect-CMS-ruleset.yaml": wordpress_ruleset})

    assert written == [str(out / "detect-CMS-ruleset.yaml")]
    assert load_ruleset(written[0]) == wordpress_ruleset
    # no staging directory left behind
    assert os.listdir(out) == ["detect-CMS-ruleset.yaml"]


def test_publish_failure_leaves_existing_files(tmp_path, wordpress_ruleset):
    existing = tmp_path / "detect-CMS-ruleset.yaml"
    existing.write_text("previous run\n")

    documents = {
        "detect-CMS-ruleset.yaml": wordpress_ruleset,
        "missing-dir/detect-bad-ruleset.yaml": wordpress_ruleset,
    }
    with pytest.raises(OutputWriteError):
        RulesetEmitter(str(tmp_path)).publish(documents)

    assert existing.read_text() == "previous run\n"
    assert sorted(os.listdir(tmp_path)) == ["detect-CMS-ruleset.yaml"]


def test_publish_into_unwritable_location(tmp_path, wordpress_ruleset):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(OutputWriteError):
        RulesetEmitter(str(blocker / "out")).publish({"a.yaml": wordpress_ruleset})


def test_publish_with_verify(tmp_path, wordpress_ruleset):
    written = RulesetEmitter(str(tmp_path), verify=True).publish({"detect-CMS-ruleset.yaml": wordpress_ruleset})
    assert load_ruleset(written[0]) == wordpress_ruleset


def test_publish_verify_mismatch_writes_nothing(tmp_path, monkeypatch, wordpress_ruleset):
    altered = dataclasses.replace(wordpress_ruleset, author="someone else")
    monkeypatch.setattr("core.emitter.load_ruleset", lambda path: altered)

    with pytest.raises(VerificationError) as exc:
        RulesetEmitter(str(tmp_path), verify=True).publish({"detect-CMS-ruleset.yaml": wordpress_ruleset})

    assert exc.value.error_code == "VERIFICATION_ERROR"
    assert os.listdir(tmp_path) == []
