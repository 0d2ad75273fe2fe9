"""Configuration schema using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sploitbot.agent.tools.sploitus.client import DEFAULT_BASE_URL, DEFAULT_USER_AGENT


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SploitusToolConfig(Base):
    """Sploitus search tool configuration."""

    enabled: bool = True
    base_url: str = DEFAULT_BASE_URL
    proxy_url: str = ""  # e.g. "http://127.0.0.1:8080" or "socks5://..."
    timeout: float = Field(default=30.0, gt=0)
    user_agent: str = DEFAULT_USER_AGENT


class ToolsConfig(Base):
    """Tools configuration."""

    sploitus: SploitusToolConfig = Field(default_factory=SploitusToolConfig)


class Config(Base):
    """Root configuration for sploitbot."""

    tools: ToolsConfig = Field(default_factory=ToolsConfig)
