# SPDX-License-Identifier: Apache-2.0
"""Trust Score plugin for NeMo Data Designer.

Adds a ``trust-score`` column type that rates news and social text for
credibility using weighted keyword rules plus caps, punctuation and clickbait
heuristics. Deterministic, no LLM calls.

Usage::

    from data_designer_trust_score import TrustScoreColumnConfig

    builder.add_column(TrustScoreColumnConfig(
        name="trust_check",
        target_columns=["article"],
        rules=[{"term": "alleged", "weight": 5, "type": "biased"}],
        min_score=60,
    ))

The engine can also be used directly::

    from data_designer_trust_score import Rule, Category, analyze_text

    result = analyze_text(text, [Rule("alleged", 5, Category.BIASED)])
"""

from data_designer_trust_score.config import TrustScoreColumnConfig
from data_designer_trust_score.core import (
    AnalysisResult,
    BiasedLanguage,
    Category,
    Hyperparameters,
    Rule,
    Sensationalism,
    SourceVerification,
    analyze_text,
)
from data_designer_trust_score.errors import (
    InvalidInputError,
    MalformedRuleError,
    PersistenceError,
    RuleSetUnavailableError,
    TrustScoreError,
)
from data_designer_trust_score.service import TrustScoreService

__all__ = [
    "TrustScoreColumnConfig",
    "analyze_text",
    "Hyperparameters",
    "Rule",
    "Category",
    "AnalysisResult",
    "Sensationalism",
    "BiasedLanguage",
    "SourceVerification",
    "TrustScoreService",
    "TrustScoreError",
    "InvalidInputError",
    "RuleSetUnavailableError",
    "MalformedRuleError",
    "PersistenceError",
]
