"""Sploitus search models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

ResultCategory = Literal["exploits", "tools"]
SortOrder = Literal["default", "date", "score"]

VALID_CATEGORIES: tuple[ResultCategory, ...] = ("exploits", "tools")
VALID_SORTS: tuple[SortOrder, ...] = ("default", "date", "score")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


def _optional_score(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return None


@dataclass(slots=True, frozen=True)
class SearchResultItem:
    """One exploit or tool record returned by Sploitus."""

    id: str
    title: str
    href: str
    kind: str
    score: float | None = None
    published_date: str | None = None
    language: str | None = None
    download_url: str | None = None
    body_text: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchResultItem":
        if not isinstance(data, dict):
            raise ValueError("search result item must be an object")
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            href=str(data.get("href") or ""),
            kind=str(data.get("type") or ""),
            score=_optional_score(data.get("score")),
            published_date=_optional_str(data.get("published")),
            language=_optional_str(data.get("language")),
            download_url=_optional_str(data.get("download")),
            body_text=_optional_str(data.get("source")),
        )


@dataclass(slots=True, frozen=True)
class SearchResultSet:
    """Search response: items in upstream relevance order plus the reported total."""

    items: tuple[SearchResultItem, ...] = ()
    total_matches: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchResultSet":
        if not isinstance(data, dict):
            raise ValueError("search response must be an object")

        raw_items = data.get("exploits")
        if raw_items is None:
            raw_items = []
        if not isinstance(raw_items, list):
            raise ValueError("search response field 'exploits' must be a list")

        try:
            total = int(data.get("exploits_total") or 0)
        except (TypeError, ValueError):
            raise ValueError("search response field 'exploits_total' must be an integer") from None

        return cls(
            items=tuple(SearchResultItem.from_dict(item) for item in raw_items),
            total_matches=max(total, 0),
        )


@dataclass(slots=True, frozen=True)
class FormatRequest:
    """Caller parameters for rendering a result set."""

    query: str
    result_category: ResultCategory = "exploits"
    requested_limit: int = 0
