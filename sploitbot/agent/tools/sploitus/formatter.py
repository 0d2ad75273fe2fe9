"""Markdown report rendering for Sploitus results under fixed size ceilings.

Two independent guards keep the report small enough to hand back to a model:
an oversized ``source`` body is replaced by a notice, and rendering stops at
an item boundary once the whole report would pass the total ceiling.
"""

from __future__ import annotations

from collections.abc import Callable

from sploitbot.agent.tools.sploitus.models import (
    FormatRequest,
    ResultCategory,
    SearchResultItem,
    SearchResultSet,
)

DEFAULT_LIMIT = 10
MAX_SOURCE_BYTES = 50 * 1024
MAX_OUTPUT_BYTES = 80 * 1024

SOURCE_TRUNCATED_NOTICE = "[source truncated, exceeded 50 KB limit]"
QUERY_TRUNCATED_MARKER = "... [query truncated]"
# Room kept after the header for the section line, empty notice or truncation warning.
HEADER_RESERVE_BYTES = 1024

_SECTION_TITLES: dict[ResultCategory, str] = {
    "exploits": "Exploits",
    "tools": "Security Tools",
}
_EMPTY_NOTICES: dict[ResultCategory, str] = {
    "exploits": "No exploits were found for this query.",
    "tools": "No security tools were found for this query.",
}

FieldGetter = Callable[[SearchResultItem], "str | None"]


def _format_score(score: float) -> str:
    try:
        value = float(score)
    except OverflowError:
        return str(score)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _score(item: SearchResultItem) -> str | None:
    return None if item.score is None else _format_score(item.score)


# (label, getter, optional) in display order; optional fields are skipped when empty.
_FIELDS: dict[ResultCategory, tuple[tuple[str, FieldGetter, bool], ...]] = {
    "exploits": (
        ("URL", lambda item: item.href, False),
        ("CVSS Score", _score, True),
        ("Type", lambda item: item.kind, False),
        ("Published", lambda item: item.published_date, True),
        ("Language", lambda item: item.language, True),
    ),
    "tools": (
        ("URL", lambda item: item.href, False),
        ("Download", lambda item: item.download_url, True),
        ("Source Type", lambda item: item.kind, False),
    ),
}


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _category(value: str) -> ResultCategory:
    return "tools" if value == "tools" else "exploits"


def resolve_limit(requested: int, available: int) -> int:
    """Return how many items to render: non-positive requests use the default, then clamp."""
    effective = DEFAULT_LIMIT if requested <= 0 else requested
    return max(min(effective, available), 0)


def guard_source(body: str | None) -> str | None:
    """Per-item guard: replace a body over MAX_SOURCE_BYTES with a fixed notice."""
    if body is None:
        return None
    if _byte_len(body) > MAX_SOURCE_BYTES:
        return SOURCE_TRUNCATED_NOTICE
    return body


def fits_total(current: int, addition: int, reserve: int = 0) -> bool:
    """Total guard: whether ``addition`` bytes still fit, keeping ``reserve`` bytes free."""
    return current + addition + reserve <= MAX_OUTPUT_BYTES


def _render_header(query: str, category: ResultCategory, total_matches: int) -> str:
    return (
        "# Sploitus Search Results\n\n"
        f"**Query:** `{query}`\n"
        f"**Type:** {category}\n"
        f"**Total matches on Sploitus:** {total_matches}\n\n"
        "---\n\n"
    )


def bound_query(query: str, budget: int) -> str:
    """Return ``query`` unchanged if it fits ``budget`` bytes, else a marked UTF-8 safe prefix."""
    if _byte_len(query) <= budget:
        return query
    keep = max(budget - _byte_len(QUERY_TRUNCATED_MARKER), 0)
    prefix = query.encode("utf-8")[:keep].decode("utf-8", "ignore")
    return prefix + QUERY_TRUNCATED_MARKER


def render_header(request: FormatRequest, results: SearchResultSet) -> str:
    """Render the report header; the query is echoed verbatim unless it alone would break the ceiling."""
    category = _category(request.result_category)
    fixed = _byte_len(_render_header("", category, results.total_matches))
    query = bound_query(request.query, MAX_OUTPUT_BYTES - HEADER_RESERVE_BYTES - fixed)
    return _render_header(query, category, results.total_matches)


def render_item(index: int, item: SearchResultItem, category: ResultCategory) -> str:
    """Render one numbered item block, body guard applied."""
    lines = [f"### {index + 1}. {item.title}", ""]
    for label, getter, optional in _FIELDS[_category(category)]:
        value = getter(item)
        if value or not optional:
            lines.append(f"**{label}:** {value or ''}".rstrip())

    source = guard_source(item.body_text)
    if source is not None:
        lines.extend(["", "**Source:**", "```", source, "```"])

    lines.extend(["", "---", "", ""])
    return "\n".join(lines)


def _truncation_warning(shown: int, effective: int) -> str:
    return (
        "**Results truncated:** output exceeded the 80 KB limit; "
        f"showing {shown} of {effective} results ({effective - shown} omitted).\n"
    )


def format_results(request: FormatRequest, results: SearchResultSet) -> str:
    """
    Render a search result set as a Markdown report.

    The report always starts with the query header. Items keep upstream order,
    are never split, and rendering stops with a single warning line once the
    next item would push the report past MAX_OUTPUT_BYTES.
    """
    category = _category(request.result_category)
    items = results.items
    header = render_header(request, results)

    if not items:
        return header + _EMPTY_NOTICES[category] + "\n"

    effective = resolve_limit(request.requested_limit, len(items))
    parts = [header, f"## {_SECTION_TITLES[category]} (showing up to {effective})\n\n"]
    size = sum(_byte_len(part) for part in parts)

    for index in range(effective):
        block = render_item(index, items[index], category)
        remaining = effective - index - 1
        # Room for the warning is kept unless this is the last item to render.
        reserve = _byte_len(_truncation_warning(index + 1, effective)) if remaining else 0
        if not fits_total(size, _byte_len(block), reserve):
            parts.append(_truncation_warning(index, effective))
            break
        parts.append(block)
        size += _byte_len(block)

    return "".join(parts)
