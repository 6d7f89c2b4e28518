from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from data_designer.engine.column_generators.generators.base import ColumnGeneratorFullColumn

from data_designer_trust_score.config import TrustScoreColumnConfig
from data_designer_trust_score.core import Rule, analyze_text
from data_designer_trust_score.errors import InvalidInputError
from data_designer_trust_score.rules import StaticRuleSetProvider, YamlRuleSetProvider, load_rule_set

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)


def load_column_rules(config: TrustScoreColumnConfig) -> tuple[Rule, ...]:
    """Merge the inline rule rows and the optional YAML rule file into one snapshot."""
    rules = load_rule_set(StaticRuleSetProvider(config.rules))
    if config.rules_path:
        rules += load_rule_set(YamlRuleSetProvider(config.rules_path))
    return rules


def score_row_text(text: str, rules: tuple[Rule, ...], config: TrustScoreColumnConfig) -> dict:
    try:
        analysis = analyze_text(text, rules)
    except InvalidInputError as exc:
        return {"is_valid": False, "trust_score": None, "error": str(exc)}
    output: dict = {
        "is_valid": analysis.trust_score >= config.min_score,
        "trust_score": analysis.trust_score,
        "sensationalism": analysis.sensationalism.value,
        "biased_language": analysis.biased_language.value,
        "source_verification": analysis.source_verification.value,
    }
    if config.include_details:
        output["trust_counts"] = dict(analysis.counts)
        output["trust_issues"] = list(analysis.issues)
    return output


class TrustScoreColumnGenerator(ColumnGeneratorFullColumn[TrustScoreColumnConfig]):
    """Column generator that scores text for trust signals via keyword rules."""

    def generate(self, data: pd.DataFrame) -> pd.DataFrame:
        logger.info(f"\U0001f50e Scoring column {self.config.name!r} for trust signals")
        logger.info(f"   target columns: {self.config.target_columns}")
        logger.info(f"   min_score: {self.config.min_score}")

        rules = load_column_rules(self.config)
        logger.info(f"   rules: {len(rules)}")

        results = []
        for _, row in data[self.config.target_columns].iterrows():
            text = " ".join(str(v) for v in row.values if v is not None)
            results.append(score_row_text(text, rules, self.config))

        data = data.copy()
        data[self.config.name] = results
        return data
