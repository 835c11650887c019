from core.bucketer import CategoryBucketer, single_ruleset
from core.settings import ConverterSettings
from models.ruleset import DetectionRule, HTTPHeaderField
from converters import techjson, builtwith
from models.sources import BuiltWithRecord


def _rule(name="detect_foo"):
    return DetectionRule(
        rule_name=name,
        object_name=name,
        http_header_fields=[HTTPHeaderField(key="Server", value=["foo"])],
    )


def test_fan_out_into_independent_copies():
    table = {"1": "cms", "3": "web_frameworks"}
    bucketer = CategoryBucketer()
    placed = bucketer.add(_rule(), [table.get(c) for c in ["1", "3"]])

    assert placed == 2
    rulesets = bucketer.rulesets()
    assert set(rulesets) == {"cms", "web_frameworks"}

    cms_rule = rulesets["cms"].rule_groups[0].detection_rules[0]
    fw_rule = rulesets["web_frameworks"].rule_groups[0].detection_rules[0]
    assert cms_rule == fw_rule
    assert cms_rule is not fw_rule

    cms_rule.http_header_fields[0].value.append("changed")
    assert fw_rule.http_header_fields[0].value == ["foo"]


def test_unresolved_categories_are_skipped():
    bucketer = CategoryBucketer()
    assert bucketer.add(_rule("a"), [None, "cms"]) == 1
    assert bucketer.add(_rule("b"), [None]) == 0
    assert bucketer.add(_rule("c"), []) == 0

    rulesets = bucketer.rulesets()
    assert list(rulesets) == ["cms"]
    assert [r.rule_name for r in rulesets["cms"].all_rules()] == ["a"]


def test_bucket_metadata():
    settings = ConverterSettings(author="Tester")
    bucketer = CategoryBucketer(
        settings,
        group_name_for=lambda category: f"detect_web_technologies_{category}",
        created_at="2024-01-01T00:00:00+00:00",
    )
    bucketer.add(_rule(), ["Web frameworks"])
    ruleset = bucketer.rulesets()["Web frameworks"]

    assert ruleset.ruleset_name == "detect_Web_frameworks_ruleset"
    assert ruleset.description == "Ruleset to detect Web frameworks technologies."
    assert ruleset.format_version == "1.0.4"
    assert ruleset.author == "Tester"
    assert ruleset.created_at == "2024-01-01T00:00:00+00:00"
    assert len(ruleset.rule_groups) == 1
    assert ruleset.rule_groups[0].group_name == "detect_web_technologies_Web frameworks"
    assert ruleset.rule_groups[0].is_enabled is True


def test_description_replaces_underscores():
    bucketer = CategoryBucketer()
    bucketer.add(_rule(), ["web_frameworks"])
    ruleset = bucketer.rulesets()["web_frameworks"]
    assert ruleset.ruleset_name == "detect_web_frameworks_ruleset"
    assert ruleset.description == "Ruleset to detect web frameworks technologies."


def test_single_ruleset():
    ruleset = single_ruleset("detect_x", "group_x", "desc", rules=[_rule()])
    assert ruleset.rule_count() == 1
    assert ruleset.rule_groups[0].group_name == "group_x"
    assert "T" in ruleset.created_at


def test_techjson_buckets(sample_document):
    rulesets = techjson.build_rulesets(sample_document)

    assert set(rulesets) == {"CMS", "Blogs", "Web frameworks"}
    assert [r.rule_name for r in rulesets["CMS"].all_rules()] == ["detect_wordpress"]
    assert rulesets["CMS"].all_rules() == rulesets["Blogs"].all_rules()
    assert [r.rule_name for r in rulesets["Web frameworks"].all_rules()] == ["detect_django"]
    # Mystery only has an unknown category code and is dropped
    names = {r.rule_name for rs in rulesets.values() for r in rs.all_rules()}
    assert "detect_mystery" not in names


def test_techjson_bucketing_is_repeatable(sample_document):
    first = techjson.build_rulesets(sample_document)
    second = techjson.build_rulesets(sample_document)

    assert list(first) == list(second)
    for category in first:
        assert first[category].all_rules() == second[category].all_rules()


def test_builtwith_buckets():
    technologies = {
        "Drupal": BuiltWithRecord(name="Drupal", categories=["1"]),
        "Django": BuiltWithRecord(name="Django", categories=["2", "1"]),
        "Other": BuiltWithRecord(name="Other", categories=["42"]),
    }
    rulesets = builtwith.build_rulesets(technologies, {"1": "cms", "2": "web_frameworks"})

    assert [r.rule_name for r in rulesets["cms"].all_rules()] == ["detect_django", "detect_drupal"]
    assert [r.rule_name for r in rulesets["web_frameworks"].all_rules()] == ["detect_django"]
    assert rulesets["cms"].rule_groups[0].group_name == "detect_web_technologies"
