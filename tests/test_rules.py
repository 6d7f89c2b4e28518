import logging

import pytest

from data_designer_trust_score.core import Category, Rule
from data_designer_trust_score.errors import RuleSetUnavailableError
from data_designer_trust_score.rules import (
    RuleRecord,
    StaticRuleSetProvider,
    YamlRuleSetProvider,
    coerce_rules,
    load_rule_set,
)


RULES_YAML = """\
keywords:
  - {term: shocking, weight: 4, type: sensational}
  - {term: alleged, weight: 5, type: Biased}
  - {term: sources say, weight: 6, category: source}
  - {term: "!!!", weight: 2, type: sensational}
"""


class _FailingProvider:
    def fetch_rows(self):
        raise ConnectionError("rule store is down")


class _NoneProvider:
    def fetch_rows(self):
        return None


class TestCoerceRules:
    def test_store_row_shape(self):
        rules = coerce_rules([{"id": 7, "term": "alleged", "weight": 5, "type": "biased"}])
        assert rules == (Rule("alleged", 5.0, Category.BIASED),)

    def test_category_is_case_insensitive(self):
        record = RuleRecord.model_validate({"term": "shocking", "weight": 4, "category": " Sensational "})
        assert record.category == Category.SENSATIONAL

    def test_weight_is_coerced(self):
        (rule,) = coerce_rules([{"term": "alleged", "weight": "2.5", "type": "biased"}])
        assert rule.weight == 2.5

    def test_malformed_rows_are_skipped(self, caplog):
        rows = [
            {"term": "alleged", "weight": 5, "type": "biased"},
            {"term": "alleged", "type": "biased"},
            {"term": "alleged", "weight": 0, "type": "biased"},
            {"term": "alleged", "weight": -3, "type": "biased"},
            {"term": "   ", "weight": 5, "type": "biased"},
            {"term": "", "weight": 5, "type": "biased"},
            {"term": "satire", "weight": 5, "type": "satire"},
            "not a row",
            None,
        ]
        with caplog.at_level(logging.WARNING):
            rules = coerce_rules(rows)
        assert rules == (Rule("alleged", 5.0, Category.BIASED),)
        assert caplog.text.count("Skipping malformed rule row") == 8

    def test_returns_immutable_snapshot(self):
        assert isinstance(coerce_rules([]), tuple)


class TestProviders:
    def test_static_provider(self):
        provider = StaticRuleSetProvider([
            {"term": "alleged", "weight": 5, "type": "biased"},
            Rule("sources say", 6, Category.SOURCE),
        ])
        rules = load_rule_set(provider)
        assert rules == (
            Rule("alleged", 5.0, Category.BIASED),
            Rule("sources say", 6.0, Category.SOURCE),
        )

    def test_yaml_provider(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(RULES_YAML, encoding="utf-8")
        rules = load_rule_set(YamlRuleSetProvider(str(path)))
        assert len(rules) == 4
        assert Rule("!!!", 2.0, Category.SENSATIONAL) in rules
        assert Rule("sources say", 6.0, Category.SOURCE) in rules

    def test_yaml_provider_rereads_on_every_fetch(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(RULES_YAML, encoding="utf-8")
        provider = YamlRuleSetProvider(str(path))
        assert len(load_rule_set(provider)) == 4
        path.write_text("keywords: []\n", encoding="utf-8")
        assert load_rule_set(provider) == ()

    def test_missing_file_is_unavailable(self, tmp_path):
        with pytest.raises(RuleSetUnavailableError):
            load_rule_set(YamlRuleSetProvider(str(tmp_path / "missing.yaml")))

    def test_missing_keywords_key_is_unavailable(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules: []\n", encoding="utf-8")
        with pytest.raises(RuleSetUnavailableError):
            load_rule_set(YamlRuleSetProvider(str(path)))

    def test_provider_failure_is_unavailable(self):
        with pytest.raises(RuleSetUnavailableError) as excinfo:
            load_rule_set(_FailingProvider())
        assert isinstance(excinfo.value.__cause__, ConnectionError)

    def test_provider_returning_nothing_is_unavailable(self):
        with pytest.raises(RuleSetUnavailableError):
            load_rule_set(_NoneProvider())
