"""Command line front end for ad-hoc Sploitus searches."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from sploitbot import __version__
from sploitbot.agent.tools.factory import build_tool_registry
from sploitbot.agent.tools.sploitus.models import VALID_CATEGORIES, VALID_SORTS
from sploitbot.config.loader import load_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sploitbot",
        description="Search Sploitus for exploits or security tools.",
    )
    parser.add_argument("query", help="search query, e.g. CVE-2026-1234 or nginx")
    parser.add_argument("--type", dest="exploit_type", choices=VALID_CATEGORIES, default="exploits")
    parser.add_argument("--sort", choices=VALID_SORTS, default="default")
    parser.add_argument("--max-results", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="path to config.json")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def run(args: argparse.Namespace) -> str:
    config = load_config(args.config)
    registry = build_tool_registry(config)
    params: dict = {"query": args.query, "exploit_type": args.exploit_type, "sort": args.sort}
    if args.max_results is not None:
        params["max_results"] = args.max_results
    return await registry.execute("sploitus_search", params)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    result = asyncio.run(run(args))
    if result.startswith("Error"):
        print(result, file=sys.stderr)
        return 1
    print(result)
    return 0
