"""Simple in-memory store for pipeline runs grouped by session."""

from __future__ import annotations

from collections import defaultdict
from typing import DefaultDict, List, Tuple

from .schemas import PipelineResult


class SessionMemory:
    """Keep every run of a session so callers can rebuild its history."""

    def __init__(self) -> None:
        self._store: DefaultDict[str, List[Tuple[PipelineResult, str]]] = defaultdict(list)

    def append_run(self, session_id: str, result: PipelineResult, markdown: str) -> None:
        """Persist a pipeline result and its rendered report for the given session."""

        self._store[session_id].append((result, markdown))

    def get_runs(self, session_id: str) -> List[PipelineResult]:
        """Return the stored runs, oldest first."""

        return [result for result, _ in self._store.get(session_id, [])]

    def combined_markdown(self, session_id: str) -> str | None:
        """Concatenate run reports in the order they were stored."""

        runs = self._store.get(session_id)
        if not runs:
            return None
        return "\n\n---\n\n".join(markdown for _, markdown in runs if markdown) or None

    def clear(self, session_id: str | None = None) -> None:
        if session_id is None:
            self._store.clear()
        else:
            self._store.pop(session_id, None)


session_memory = SessionMemory()
