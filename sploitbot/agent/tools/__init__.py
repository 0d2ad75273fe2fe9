"""Agent tools."""

from sploitbot.agent.tools.base import Tool
from sploitbot.agent.tools.registry import ToolRegistry

__all__ = ["Tool", "ToolRegistry"]
