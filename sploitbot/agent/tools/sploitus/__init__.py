"""Sploitus exploit/tool search."""

from sploitbot.agent.tools.sploitus.client import SploitusClient, SploitusError
from sploitbot.agent.tools.sploitus.formatter import format_results
from sploitbot.agent.tools.sploitus.models import FormatRequest, SearchResultItem, SearchResultSet
from sploitbot.agent.tools.sploitus.tool import SploitusTool, ToolContext

__all__ = [
    "FormatRequest",
    "SearchResultItem",
    "SearchResultSet",
    "SploitusClient",
    "SploitusError",
    "SploitusTool",
    "ToolContext",
    "format_results",
]
