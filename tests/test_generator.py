from data_designer_trust_score.config import TrustScoreColumnConfig
from data_designer_trust_score.generator import load_column_rules, score_row_text


RULE_ROWS = [
    {"term": "alleged", "weight": 5, "type": "biased"},
    {"term": "shocking", "weight": 4, "type": "sensational"},
    {"term": "bad row"},
]


def _config(**overrides):
    kwargs = {"name": "trust_check", "target_columns": ["title", "body"], "rules": RULE_ROWS}
    kwargs.update(overrides)
    return TrustScoreColumnConfig(**kwargs)


class TestColumnConfig:
    def test_defaults(self):
        config = _config()
        assert config.column_type == "trust-score"
        assert config.min_score == 60
        assert config.include_details is False
        assert config.required_columns == ["title", "body"]
        assert config.side_effect_columns == []


class TestColumnRules:
    def test_inline_rules_skip_bad_rows(self):
        assert len(load_column_rules(_config())) == 2

    def test_rules_path_is_merged(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("keywords:\n  - {term: sources say, weight: 6, type: source}\n", encoding="utf-8")
        rules = load_column_rules(_config(rules_path=str(path)))
        assert [r.term for r in rules] == ["alleged", "shocking", "sources say"]


class TestScoreRowText:
    def test_valid_row(self):
        config = _config()
        output = score_row_text("It is alleged that alleged wrongdoing occurred.", load_column_rules(config), config)
        assert output == {
            "is_valid": True,
            "trust_score": 90,
            "sensationalism": "Low",
            "biased_language": "High",
            "source_verification": "Appears Sourced",
        }

    def test_below_min_score_is_invalid(self):
        config = _config(min_score=95)
        output = score_row_text("It is alleged that alleged wrongdoing occurred.", load_column_rules(config), config)
        assert output["is_valid"] is False

    def test_details(self):
        config = _config(include_details=True)
        output = score_row_text("Shocking!", load_column_rules(config), config)
        assert output["trust_counts"] == {"sensational": 1, "biased": 0, "source": 0}
        assert output["trust_issues"] == ['"shocking" (1x)']

    def test_blank_row_has_no_score(self):
        config = _config()
        output = score_row_text("   ", load_column_rules(config), config)
        assert output["is_valid"] is False
        assert output["trust_score"] is None
        assert "error" in output


class TestPlugin:
    def test_registration_points_at_trust_score_classes(self):
        from data_designer_trust_score.plugin import trust_score_plugin

        assert trust_score_plugin.config_qualified_name == "data_designer_trust_score.config.TrustScoreColumnConfig"
        assert trust_score_plugin.impl_qualified_name == "data_designer_trust_score.generator.TrustScoreColumnGenerator"
