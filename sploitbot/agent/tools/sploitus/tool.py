"""Sploitus exploit and security tool search."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from loguru import logger

from sploitbot.agent.search_log import SearchLog, SearchLogProvider
from sploitbot.agent.tools.base import Tool
from sploitbot.agent.tools.sploitus.client import SploitusClient, SploitusError
from sploitbot.agent.tools.sploitus.formatter import DEFAULT_LIMIT, format_results
from sploitbot.agent.tools.sploitus.models import (
    VALID_CATEGORIES,
    VALID_SORTS,
    FormatRequest,
)

if TYPE_CHECKING:
    from sploitbot.config.schema import SploitusToolConfig

SEARCH_ENGINE = "sploitus"


@dataclass(slots=True, frozen=True)
class ToolContext:
    """Identifiers of the flow step a tool call belongs to."""

    flow_id: int | None = None
    task_id: int | None = None
    subtask_id: int | None = None


class SploitusTool(Tool):
    """Search Sploitus for public exploits or offensive security tools."""

    name = "sploitus_search"
    description = (
        "Search Sploitus for public exploits (by CVE, product or keyword) or for "
        "security tools. Returns a Markdown report with links, scores and sources."
    )
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "minLength": 1,
                "maxLength": 1024,
                "description": "Search query, e.g. a CVE id, product name or keyword",
            },
            "exploit_type": {
                "type": "string",
                "enum": list(VALID_CATEGORIES),
                "description": "Search exploits or security tools (default: exploits)",
            },
            "sort": {
                "type": "string",
                "enum": list(VALID_SORTS),
                "description": "Result ordering (default: default)",
            },
            "max_results": {
                "type": "integer",
                "description": f"Maximum number of results to show (default: {DEFAULT_LIMIT})",
            },
        },
        "required": ["query"],
    }

    def __init__(
        self,
        sploitus_config: "SploitusToolConfig | None" = None,
        *,
        search_log_provider: SearchLogProvider | None = None,
        context: ToolContext | None = None,
    ):
        from sploitbot.config.schema import SploitusToolConfig

        self.config = sploitus_config or SploitusToolConfig()
        self._search_log_provider = search_log_provider
        self._context = context or ToolContext()
        self._client = SploitusClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            proxy_url=self.config.proxy_url,
            user_agent=self.config.user_agent,
        )

    @property
    def is_available(self) -> bool:
        return self.config.enabled

    async def execute(
        self,
        query: str,
        exploit_type: str | None = None,
        sort: str | None = None,
        max_results: int | None = None,
        **kwargs: Any,
    ) -> str:
        if not self.is_available:
            return "Error: sploitus search is disabled"

        query = (query or "").strip()
        if not query:
            return "Error: query is required"
        category = exploit_type or "exploits"
        if category not in VALID_CATEGORIES:
            return f"Error: exploit_type must be one of {list(VALID_CATEGORIES)}"
        sort = sort or "default"
        if sort not in VALID_SORTS:
            return f"Error: sort must be one of {list(VALID_SORTS)}"
        limit = DEFAULT_LIMIT if max_results is None else int(max_results)

        logger.info("Sploitus search: query={!r} type={} sort={}", query, category, sort)
        try:
            results = await self._client.search(query=query, category=category, sort=sort)  # type: ignore[arg-type]
        except SploitusError as e:
            logger.error("Sploitus search failed for {!r}: {}", query, e)
            return f"Error: sploitus search failed: {e}"

        logger.debug(
            "Sploitus returned {} items ({} total matches)",
            len(results.items),
            results.total_matches,
        )
        report = format_results(
            FormatRequest(query=query, result_category=category, requested_limit=limit),  # type: ignore[arg-type]
            results,
        )
        await self._record(query, report)
        return report

    async def _record(self, query: str, report: str) -> None:
        if self._search_log_provider is None:
            return
        entry = SearchLog(
            engine=SEARCH_ENGINE,
            query=query,
            result=report,
            flow_id=self._context.flow_id,
            task_id=self._context.task_id,
            subtask_id=self._context.subtask_id,
        )
        try:
            await self._search_log_provider.put_log(entry)
        except Exception as e:
            logger.warning("Failed to store sploitus search log: {}", e)
