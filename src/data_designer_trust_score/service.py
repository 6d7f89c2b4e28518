from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait

from data_designer_trust_score.core import (
    DEFAULT_HYPERPARAMETERS,
    AnalysisResult,
    Hyperparameters,
    analyze_text,
    validate_text,
)
from data_designer_trust_score.history import HistoryEntry, HistoryStore, make_entry
from data_designer_trust_score.rules import RuleSetProvider, load_rule_set

logger = logging.getLogger(__name__)


class TrustScoreService:
    """Fetches a rule snapshot, runs the scorer, and optionally records history.

    History writes run on a background worker and never change or delay the
    returned result. Use as a context manager, or call ``close()`` when done.
    """

    def __init__(
        self,
        provider: RuleSetProvider,
        history: HistoryStore | None = None,
        hyperparameters: Hyperparameters | None = None,
    ):
        self.provider = provider
        self.history_store = history
        self.hp = hyperparameters or DEFAULT_HYPERPARAMETERS
        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="trust-score-history")
        self._pending: list[Future] = []
        self._pending_lock = threading.Lock()
        self._closed = False

    def __enter__(self) -> TrustScoreService:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def analyze(self, text: str, user_id: str | None = None) -> AnalysisResult:
        validate_text(text)
        rules = load_rule_set(self.provider)
        result = analyze_text(text, rules, self.hp)
        self._record(user_id, text, result)
        return result

    def compare(self, text_a: str, text_b: str, user_id: str | None = None) -> tuple[AnalysisResult, AnalysisResult]:
        """Score two texts side by side against one shared rule snapshot."""
        validate_text(text_a)
        validate_text(text_b)
        rules = load_rule_set(self.provider)
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="trust-score-compare") as pool:
            fut_a = pool.submit(analyze_text, text_a, rules, self.hp)
            fut_b = pool.submit(analyze_text, text_b, rules, self.hp)
            result_a, result_b = fut_a.result(), fut_b.result()
        self._record(user_id, text_a, result_a)
        self._record(user_id, text_b, result_b)
        return result_a, result_b

    def history(self, user_id: str) -> list[HistoryEntry]:
        if self.history_store is None:
            return []
        return self.history_store.list_for_user(user_id)

    def flush(self) -> None:
        """Block until queued history writes have finished."""
        with self._pending_lock:
            pending, self._pending = self._pending, []
        wait(pending)

    def close(self) -> None:
        with self._pending_lock:
            self._closed = True
        self.flush()
        self._writer.shutdown(wait=True)

    def _record(self, user_id: str | None, text: str, result: AnalysisResult) -> None:
        if not user_id or self.history_store is None:
            return
        entry = make_entry(user_id, text, result, self.hp.snippet_chars)
        with self._pending_lock:
            if self._closed:
                logger.warning("History write skipped (non-fatal): service is closed")
                return
            future = self._writer.submit(self.history_store.record, entry)
            self._pending = [f for f in self._pending if not f.done()] + [future]
        future.add_done_callback(_log_write_failure)


def _log_write_failure(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.warning(f"History write failed (non-fatal): {exc}")
