"""
sploitbot - exploit and security tool search for agent workflows.
"""

__version__ = "0.1.0"
__logo__ = "🔎"
