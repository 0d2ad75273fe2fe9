"""Agent-facing components: tools and search logging."""
