"""
Entry point for running sploitbot as a module: python -m sploitbot
"""

from sploitbot.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
