# Rule-based trust scorer for news and social text.
#
# Counts weighted lexical rules and a few structural heuristics (caps runs,
# repeated !/? runs, clickbait phrasing) and returns a bounded 0-100 trust score
# plus ordinal labels for sensationalism, biased language and source verification.

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from data_designer_trust_score.errors import InvalidInputError, MalformedRuleError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Hyperparameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Hyperparameters:
    """Tunable penalties, thresholds, and phrase lists used by the scorer."""

    score_start: float = 100.0
    score_min: int = 0
    score_max: int = 100

    caps_run_min: int = 4
    caps_penalty: float = 5.0
    punctuation_run_min: int = 2
    punctuation_penalty: float = 3.0
    clickbait_penalty: float = 15.0
    clickbait_phrases: tuple[str, ...] = field(
        default_factory=lambda: (
            "you won't believe",
            "what happened next",
            "this will shock you",
        )
    )

    sensational_high_min: int = 3
    sensational_medium_min: int = 1
    biased_high_min: int = 2
    biased_medium_min: int = 1
    source_multiple_min: int = 2
    source_unverified_min: int = 1

    snippet_chars: int = 200


DEFAULT_HYPERPARAMETERS = Hyperparameters()


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


class Category(str, Enum):
    SENSATIONAL = "sensational"
    BIASED = "biased"
    SOURCE = "source"


class Sensationalism(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class BiasedLanguage(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SourceVerification(str, Enum):
    APPEARS_SOURCED = "Appears Sourced"
    UNVERIFIED_CLAIMS_FOUND = "Unverified Claims Found"
    MULTIPLE_UNVERIFIED_CLAIMS = "Multiple Unverified Claims"


@dataclass(frozen=True)
class Rule:
    term: str
    weight: float
    category: Category


@dataclass(frozen=True)
class AnalysisResult:
    trust_score: int
    sensationalism: Sensationalism
    biased_language: BiasedLanguage
    source_verification: SourceVerification
    counts: dict[str, int] = field(default_factory=dict)
    issues: tuple[str, ...] = ()

    def to_payload(self, include_details: bool = False) -> dict[str, object]:
        payload: dict[str, object] = {
            "trustScore": self.trust_score,
            "sensationalism": self.sensationalism.value,
            "biasedLanguage": self.biased_language.value,
            "sourceVerification": self.source_verification.value,
        }
        if include_details:
            payload["counts"] = dict(self.counts)
            payload["issues"] = list(self.issues)
        return payload


@dataclass
class _MatchTally:
    score: float
    counts: dict[Category, int]
    issues: list[str]

    @classmethod
    def start(cls, hp: Hyperparameters) -> _MatchTally:
        return cls(score=hp.score_start, counts={c: 0 for c in Category}, issues=[])


# ---------------------------------------------------------------------------
# Compiled patterns
# ---------------------------------------------------------------------------


def _caps_run_re(min_len: int) -> re.Pattern[str]:
    return re.compile(r"[A-Z]{%d,}" % min_len)


def _punctuation_run_re(min_len: int) -> re.Pattern[str]:
    return re.compile(r"[!?]{%d,}" % min_len)


# ---------------------------------------------------------------------------
# Matcher
# ---------------------------------------------------------------------------


def _is_punctuation_term(term: str) -> bool:
    return not any(ch.isalnum() for ch in term)


def compile_term(term: str) -> re.Pattern[str]:
    """Build the case-insensitive matcher for a rule term.

    Terms with at least one alphanumeric character are word-bounded on both
    sides, so ``spin`` does not match inside ``spindle``. Terms made only of
    punctuation are searched for as a literal run.

    Raises:
        MalformedRuleError: If the term is empty or cannot be compiled.
    """
    if not term:
        raise MalformedRuleError("rule term is empty")
    escaped = re.escape(term)
    source = escaped if _is_punctuation_term(term) else rf"\b{escaped}\b"
    try:
        return re.compile(source, re.IGNORECASE)
    except re.error as exc:
        raise MalformedRuleError(f"rule term {term!r} cannot be compiled: {exc}") from exc


def count_matches(text: str, term: str) -> int:
    """Count non-overlapping, case-insensitive occurrences of ``term`` in ``text``."""
    return sum(1 for _ in compile_term(term).finditer(text))


# ---------------------------------------------------------------------------
# Heuristic stage
# ---------------------------------------------------------------------------


def _heuristic_caps(text: str, tally: _MatchTally, hp: Hyperparameters) -> None:
    if _caps_run_re(hp.caps_run_min).search(text):
        tally.score -= hp.caps_penalty
        tally.issues.append("Excessive capitalization")


def _heuristic_punctuation(text: str, tally: _MatchTally, hp: Hyperparameters) -> None:
    runs = len(_punctuation_run_re(hp.punctuation_run_min).findall(text))
    if runs > 0:
        tally.score -= runs * hp.punctuation_penalty
        tally.issues.append("Excessive punctuation")


def _heuristic_clickbait(text: str, tally: _MatchTally, hp: Hyperparameters) -> None:
    lowered = text.lower()
    if any(phrase.lower() in lowered for phrase in hp.clickbait_phrases):
        tally.score -= hp.clickbait_penalty
        tally.issues.append("Clickbait phrases")


_HEURISTICS = [
    _heuristic_caps,
    _heuristic_punctuation,
    _heuristic_clickbait,
]


# ---------------------------------------------------------------------------
# Aggregator & classifier
# ---------------------------------------------------------------------------


def _apply_rules(text: str, rules: Iterable[Rule], tally: _MatchTally) -> None:
    for rule in rules:
        try:
            count = count_matches(text, rule.term)
        except MalformedRuleError as exc:
            logger.warning(f"Skipping malformed rule: {exc}")
            continue
        if count <= 0:
            continue
        tally.score -= count * rule.weight
        tally.counts[rule.category] += count
        tally.issues.append(f'"{rule.term}" ({count}x)')


def _final_score(raw: float, hp: Hyperparameters) -> int:
    clamped = max(hp.score_min, min(hp.score_max, raw))
    return int(math.floor(clamped + 0.5))


def classify_sensationalism(count: int, hp: Hyperparameters = DEFAULT_HYPERPARAMETERS) -> Sensationalism:
    if count >= hp.sensational_high_min:
        return Sensationalism.HIGH
    if count >= hp.sensational_medium_min:
        return Sensationalism.MEDIUM
    return Sensationalism.LOW


def classify_biased_language(count: int, hp: Hyperparameters = DEFAULT_HYPERPARAMETERS) -> BiasedLanguage:
    if count >= hp.biased_high_min:
        return BiasedLanguage.HIGH
    if count >= hp.biased_medium_min:
        return BiasedLanguage.MEDIUM
    return BiasedLanguage.LOW


def classify_source_verification(count: int, hp: Hyperparameters = DEFAULT_HYPERPARAMETERS) -> SourceVerification:
    if count >= hp.source_multiple_min:
        return SourceVerification.MULTIPLE_UNVERIFIED_CLAIMS
    if count >= hp.source_unverified_min:
        return SourceVerification.UNVERIFIED_CLAIMS_FOUND
    return SourceVerification.APPEARS_SOURCED


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_text(text: object) -> str:
    """Return ``text`` unchanged if it is a non-blank string, else raise InvalidInputError."""
    if not isinstance(text, str) or not text.strip():
        raise InvalidInputError("Text is required for analysis")
    return text


def analyze_text(
    text: str,
    rules: Iterable[Rule] = (),
    hyperparameters: Hyperparameters | None = None,
) -> AnalysisResult:
    """Score text for trust signals.

    Args:
        text: The article or post to analyze. Must be non-blank.
        rules: Weighted lexical rules, treated as a read-only snapshot.
        hyperparameters: Optional tuning overrides. Uses sensible defaults if omitted.

    Returns:
        AnalysisResult with a 0-100 trust score and the three category labels.

    Raises:
        InvalidInputError: If ``text`` is missing or blank.
    """
    text = validate_text(text)
    hp = hyperparameters or DEFAULT_HYPERPARAMETERS
    tally = _MatchTally.start(hp)

    _apply_rules(text, rules, tally)
    for heuristic in _HEURISTICS:
        heuristic(text, tally, hp)

    score = _final_score(tally.score, hp)
    counts = {c.value: n for c, n in tally.counts.items()}
    logger.debug(
        f"Analysis: score={score} counts={counts} word_count={len(text.split())} issues={tally.issues}"
    )

    return AnalysisResult(
        trust_score=score,
        sensationalism=classify_sensationalism(tally.counts[Category.SENSATIONAL], hp),
        biased_language=classify_biased_language(tally.counts[Category.BIASED], hp),
        source_verification=classify_source_verification(tally.counts[Category.SOURCE], hp),
        counts=counts,
        issues=tuple(tally.issues),
    )
