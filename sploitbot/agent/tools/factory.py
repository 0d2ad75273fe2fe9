"""Tool registry factory."""

from sploitbot.agent.search_log import SearchLogProvider
from sploitbot.agent.tools.registry import ToolRegistry
from sploitbot.agent.tools.sploitus import SploitusTool, ToolContext
from sploitbot.config.schema import Config


def build_tool_registry(
    config: Config,
    *,
    search_log_provider: SearchLogProvider | None = None,
    context: ToolContext | None = None,
) -> ToolRegistry:
    """Build tool registry with every enabled tool."""
    registry = ToolRegistry()

    sploitus_config = config.tools.sploitus
    if sploitus_config.enabled:
        registry.register(
            SploitusTool(
                sploitus_config,
                search_log_provider=search_log_provider,
                context=context,
            )
        )

    return registry
