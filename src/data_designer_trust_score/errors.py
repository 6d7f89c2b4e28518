from __future__ import annotations


class TrustScoreError(Exception):
    """Base class for every error raised by the trust-score package."""


class InvalidInputError(TrustScoreError, ValueError):
    """Text is missing or blank after trimming."""


class RuleSetUnavailableError(TrustScoreError):
    """The rule set provider failed; scoring must not continue."""


class MalformedRuleError(TrustScoreError, ValueError):
    """A single rule cannot be turned into a matcher."""


class PersistenceError(TrustScoreError):
    """Writing an analysis to the history store failed."""
