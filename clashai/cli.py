"""Command-line entry point.

Run:
  python -m clashai "Hello, how are you?"
  python -m clashai --system "You are a pirate." --user-id u1 "Where is the treasure?"
  python -m clashai --stats --user-id u1

Env sample (.env):
  CLASHAI_API_KEY=...
  CLASHAI_MODEL=chatgpt-4o-latest
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import List, Optional

import httpx
import orjson

from .client import Client
from .config import get_settings
from .errors import ConfigError
from .logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="clashai", description="Send a prompt to the ClashAI chat API.")
    p.add_argument("prompt", nargs="*", help="user message text")
    p.add_argument("--model", help="model name (default: CLASHAI_MODEL)")
    p.add_argument("--user-id", help="conversation / stats user id")
    p.add_argument("--system", help="system message sent before the prompt")
    p.add_argument("--stats", action="store_true", help="print usage statistics for --user-id")
    p.add_argument("--json", action="store_true", help="print the raw response as JSON")
    return p


def _print_json(obj: object) -> None:
    sys.stdout.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")


async def _run(args: argparse.Namespace, http_client: Optional[httpx.AsyncClient] = None) -> int:
    s = get_settings()
    async with Client(s.api_key, args.model or s.model, settings=s, http_client=http_client) as client:
        errors: List[str] = []
        client.on("error", lambda e: errors.append(f"{type(e).__name__}: {e}"))

        if args.stats:
            res = await client.get_usage(args.user_id)
            if not res:
                sys.stderr.write(f"error: {errors[0] if errors else res.error}\n")
                return 1
            if args.json:
                _print_json(res.value.model_dump())
            else:
                r = res.value.result
                sys.stdout.write(
                    f"{r.message}\nuser: {r.user_id}\nall time: {r.requests_all_time}\nthis minute: {r.requests_this_minute}\n"
                )
            return 0

        messages = []
        if args.system:
            messages.append({"role": "system", "content": args.system})
        messages.append({"role": "user", "content": " ".join(args.prompt)})
        res = await client.make_request(messages, args.user_id)
        if not res:
            sys.stderr.write(f"error: {errors[0] if errors else res.error}\n")
            return 1
        if args.json:
            _print_json(res.value.model_dump())
        else:
            sys.stdout.write(res.value.text + "\n")
        return 0


def main(argv: Optional[List[str]] = None, *, http_client: Optional[httpx.AsyncClient] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.stats and not args.user_id:
        parser.error("--stats requires --user-id")
    if not args.stats and not args.prompt:
        parser.error("a prompt is required")

    s = get_settings()
    setup_logging(s.log_level, json=s.log_json, stream=sys.stderr)
    try:
        return asyncio.run(_run(args, http_client))
    except ConfigError as e:
        sys.stderr.write(f"config error: {e}\n")
        return 2
