from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Protocol

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from data_designer_trust_score.core import Category, Rule
from data_designer_trust_score.errors import RuleSetUnavailableError

logger = logging.getLogger(__name__)


class RuleRecord(BaseModel):
    """One raw keyword row as stored by the rule store.

    The store names the category column ``type``; ``category`` is accepted too.
    Category values are matched case-insensitively.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    term: str = Field(min_length=1)
    weight: float = Field(gt=0, allow_inf_nan=False)
    category: Category = Field(validation_alias=AliasChoices("category", "type"))

    @field_validator("term")
    @classmethod
    def _term_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("term must not be blank")
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_rule(self) -> Rule:
        return Rule(term=self.term, weight=self.weight, category=self.category)


def coerce_rules(rows: Iterable[Any]) -> tuple[Rule, ...]:
    """Validate raw rows into Rules, skipping and logging rows that do not validate."""
    rules: list[Rule] = []
    for i, row in enumerate(rows):
        try:
            rules.append(RuleRecord.model_validate(row).to_rule())
        except ValidationError as exc:
            logger.warning(f"Skipping malformed rule row {i}: {exc.error_count()} validation error(s): {row!r}")
    return tuple(rules)


class RuleSetProvider(Protocol):
    def fetch_rows(self) -> Iterable[Mapping[str, Any]]: ...


class StaticRuleSetProvider:
    """Serves a fixed, in-memory list of rows."""

    def __init__(self, rows: Iterable[Mapping[str, Any] | Rule]):
        self._rows = tuple(rows)

    def fetch_rows(self) -> list[Mapping[str, Any]]:
        return [_row_from(r) for r in self._rows]


class YamlRuleSetProvider:
    """Reads rows from the ``keywords`` list of a YAML file on every fetch.

    Example file::

        keywords:
          - {term: shocking, weight: 4, type: sensational}
          - {term: alleged, weight: 5, type: biased}
          - {term: sources say, weight: 6, type: source}
    """

    def __init__(self, path: str):
        self.path = path

    def fetch_rows(self) -> list[Mapping[str, Any]]:
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict) or "keywords" not in data:
            raise ValueError(f"Missing required key 'keywords' in {self.path}")
        keywords = data["keywords"]
        if not isinstance(keywords, list):
            raise ValueError(f"'keywords' in {self.path} must be a list")
        return keywords


def _row_from(item: Mapping[str, Any] | Rule) -> Mapping[str, Any]:
    if isinstance(item, Rule):
        return {"term": item.term, "weight": item.weight, "category": item.category.value}
    return item


def load_rule_set(provider: RuleSetProvider) -> tuple[Rule, ...]:
    """Fetch a complete snapshot of rules from ``provider``.

    Raises:
        RuleSetUnavailableError: If the provider fails for any reason. An empty
            set is never substituted.
    """
    try:
        rows = provider.fetch_rows()
        if rows is None:
            raise ValueError("provider returned no rows")
        rows = list(rows)
    except Exception as exc:
        logger.error(f"Error fetching keywords: {exc}")
        raise RuleSetUnavailableError("Failed to fetch keywords") from exc
    rules = coerce_rules(rows)
    logger.debug(f"Loaded {len(rules)} of {len(rows)} rules")
    return rules
