import logging

import pytest

from core.bucketer import single_ruleset
from core.exceptions import ConfigError
from core.ruleset_validator import find_duplicate_rule_names, find_header_overlaps, summarize
from core.settings import ConverterSettings, load_settings
from models.ruleset import DetectionRule, HTTPHeaderField, URLMicroSignature
from rules.categories_loader import load_category_table


def test_default_settings():
    settings = load_settings(None)
    assert settings == ConverterSettings()
    assert settings.format_version == "1.0.4"
    assert settings.confidence == 10


def test_settings_missing_file_uses_defaults(tmp_path):
    assert load_settings(str(tmp_path / "absent.yaml")) == ConverterSettings()


def test_settings_rejects_bad_values(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("confidence: high\n")
    with pytest.raises(ConfigError):
        load_settings(str(config))

    config.write_text("- not\n- a mapping\n")
    with pytest.raises(ConfigError):
        load_settings(str(config))


def test_default_category_table():
    assert load_category_table() == {"1": "cms", "2": "web_frameworks"}


def test_category_table_errors(tmp_path):
    table = tmp_path / "categories.yaml"
    table.write_text("other: {}\n")
    with pytest.raises(ConfigError):
        load_category_table(str(table))

    table.write_text("categories:\n  1: ''\n")
    with pytest.raises(ConfigError):
        load_category_table(str(table))

    with pytest.raises(ConfigError):
        load_category_table(str(tmp_path / "absent.yaml"))


def _rule(name, object_name, header=None):
    rule = DetectionRule(rule_name=name, object_name=object_name)
    if header:
        rule.http_header_fields.append(HTTPHeaderField(key=header, value=["x"]))
    rule.url_micro_signatures.append(URLMicroSignature(value=f"/{object_name}"))
    return rule


def test_validator_findings():
    cms = single_ruleset("detect_cms_ruleset", "g", "d", rules=[
        _rule("detect_a", "A", "X-Powered-By"),
        _rule("detect_a", "A", "X-Powered-By"),
        _rule("detect_b", "B", "X-Powered-By"),
    ])
    blogs = single_ruleset("detect_blogs_ruleset", "g", "d", rules=[_rule("detect_c", "C", "Server")])

    assert find_duplicate_rule_names(cms) == {"detect_a": 2}
    assert find_duplicate_rule_names(blogs) == {}
    assert find_header_overlaps([cms, blogs]) == {"X-Powered-By": ["A", "B"]}
    assert summarize([cms, blogs]) == {
        "detect_cms_ruleset": {"rules": 3, "signatures": 6},
        "detect_blogs_ruleset": {"rules": 1, "signatures": 2},
    }


def test_settings_missing_file_logs_warning(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        load_settings(str(tmp_path / "absent.yaml"))
    assert "absent.yaml not found, using default settings" in caplog.text
