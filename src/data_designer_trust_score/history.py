from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from data_designer_trust_score.core import DEFAULT_HYPERPARAMETERS, AnalysisResult
from data_designer_trust_score.errors import PersistenceError


@dataclass(frozen=True)
class HistoryEntry:
    user_id: str
    text_snippet: str
    trust_score: int
    analysis_details: dict[str, Any]
    analyzed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "text_snippet": self.text_snippet,
            "trust_score": self.trust_score,
            "analysis_details": dict(self.analysis_details),
            "analyzed_at": self.analyzed_at.isoformat(),
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> HistoryEntry:
        return cls(
            user_id=str(data["user_id"]),
            text_snippet=str(data["text_snippet"]),
            trust_score=int(data["trust_score"]),
            analysis_details=dict(data.get("analysis_details") or {}),
            analyzed_at=datetime.fromisoformat(str(data["analyzed_at"]).replace("Z", "+00:00")),
        )


def make_entry(
    user_id: str,
    text: str,
    result: AnalysisResult,
    snippet_chars: int = DEFAULT_HYPERPARAMETERS.snippet_chars,
) -> HistoryEntry:
    return HistoryEntry(
        user_id=user_id,
        text_snippet=text[:snippet_chars],
        trust_score=result.trust_score,
        analysis_details=result.to_payload(),
    )


class HistoryStore(Protocol):
    def record(self, entry: HistoryEntry) -> None: ...

    def list_for_user(self, user_id: str) -> list[HistoryEntry]: ...


def _newest_first(entries: list[HistoryEntry]) -> list[HistoryEntry]:
    return sorted(entries, key=lambda e: e.analyzed_at, reverse=True)


class InMemoryHistoryStore:
    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []
        self._lock = threading.Lock()

    def record(self, entry: HistoryEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def list_for_user(self, user_id: str) -> list[HistoryEntry]:
        with self._lock:
            mine = [e for e in self._entries if e.user_id == user_id]
        return _newest_first(mine)


class JsonFileHistoryStore:
    """Keeps every entry in a single JSON document on disk."""

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                state = json.load(f)
        except FileNotFoundError:
            return {"version": 1, "entries": []}
        if not isinstance(state, dict):
            raise ValueError("history document must be a JSON object")
        if not isinstance(state.setdefault("entries", []), list):
            raise ValueError("'entries' must be a list")
        return state

    def record(self, entry: HistoryEntry) -> None:
        with self._lock:
            try:
                state = self._load()
                state["entries"].append(entry.to_payload())
                with open(self.path, "w", encoding="utf-8") as f:
                    json.dump(state, f, ensure_ascii=False, indent=2)
            except (OSError, ValueError) as exc:
                raise PersistenceError(f"Failed to save analysis history to {self.path}: {exc}") from exc

    def list_for_user(self, user_id: str) -> list[HistoryEntry]:
        with self._lock:
            try:
                state = self._load()
            except (OSError, ValueError) as exc:
                raise PersistenceError(f"Failed to read analysis history from {self.path}: {exc}") from exc
        try:
            entries = [
                HistoryEntry.from_payload(e) for e in state["entries"] if isinstance(e, dict) and e.get("user_id") == user_id
            ]
            return _newest_first(entries)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise PersistenceError(f"Malformed analysis history entry in {self.path}: {exc!r}") from exc
