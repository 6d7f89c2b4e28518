from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from data_designer.config.column_configs import SingleColumnConfig


class TrustScoreColumnConfig(SingleColumnConfig):
    """Score text columns for trust signals using weighted keyword rules and heuristics.

    Matches each rule against each row's text, applies caps, punctuation and
    clickbait penalties, and produces a trust score (0-100) with sensationalism,
    biased-language and source-verification labels.

    Attributes:
        target_columns: Columns whose text content will be concatenated and scored.
        rules: Keyword rows (``term``, ``weight``, ``type``). Invalid rows are skipped.
        rules_path: Optional YAML file with a ``keywords`` list, read once per generation.
        min_score: Minimum trust score (0-100) for ``is_valid=True``. Defaults to 60.
        include_details: Include per-category match counts and the list of fired issues.
    """

    target_columns: list[str]
    rules: list[dict[str, Any]] = Field(default_factory=list, description="Weighted keyword rule rows")
    rules_path: str | None = Field(default=None, description="YAML file with a 'keywords' list")
    min_score: int = Field(default=60, ge=0, le=100, description="Minimum trust score for is_valid=True")
    include_details: bool = Field(default=False, description="Include match counts and issues in output")
    column_type: Literal["trust-score"] = "trust-score"

    @staticmethod
    def get_column_emoji() -> str:
        return "\U0001f50e"

    @property
    def required_columns(self) -> list[str]:
        return self.target_columns

    @property
    def side_effect_columns(self) -> list[str]:
        return []
