"""Search log records kept for every external search an agent performs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(slots=True)
class SearchLog:
    """One completed search: which engine, what was asked, what came back."""

    engine: str
    query: str
    result: str
    flow_id: int | None = None
    task_id: int | None = None
    subtask_id: int | None = None
    initiator: str = "agent"
    executor: str = "searcher"


class SearchLogProvider(Protocol):
    async def put_log(self, entry: SearchLog) -> int: ...


@dataclass
class InMemorySearchLogProvider:
    """Append-only search log held in memory."""

    entries: list[SearchLog] = field(default_factory=list)

    async def put_log(self, entry: SearchLog) -> int:
        self.entries.append(entry)
        return len(self.entries)
