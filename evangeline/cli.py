"""
evangeline CLI entry point.

Usage:
    evangeline --author "my bot" listen       # Print incoming messages
    evangeline --author "my bot" send "hi"    # Post one message
    evangeline upload ./cat.png --spoiler      # Upload an attachment
    evangeline info                            # Show instance info

Endpoints come from EVANGELINE_* environment variables (a .env file in the
current directory is loaded first).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys

from dotenv import load_dotenv
from loguru import logger

from evangeline import __version__


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(
        prog="evangeline",
        description="evangeline - Eludris bot toolkit",
    )
    parser.add_argument(
        "--author",
        default=os.getenv("EVANGELINE_AUTHOR", "evangeline"),
        help="Author name for sent messages, 2-32 characters (default: $EVANGELINE_AUTHOR)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"evangeline {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("listen", help="Connect to the gateway and print messages")
    send = sub.add_parser("send", help="Send a message")
    send.add_argument("content")
    upload = sub.add_parser("upload", help="Upload an attachment")
    upload.add_argument("path")
    upload.add_argument("--spoiler", action="store_true")
    sub.add_parser("info", help="Print instance info")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 0


def setup_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
        level=level.upper(),
    )


async def _run(args: argparse.Namespace) -> int:
    from evangeline.bot import Bot
    from evangeline.config import ConnectionConfig
    from evangeline.errors import EvangelineError

    async with Bot(args.author, ConnectionConfig.from_env()) as bot:
        try:
            if args.command == "listen":
                return await _listen(bot)
            if args.command == "send":
                message = await bot.send(args.content)
                print(json.dumps(message.to_dict(), ensure_ascii=False))
            elif args.command == "upload":
                data = await bot.upload_attachment(args.path, spoiler=args.spoiler)
                print(bot.attachment_url(data.id))
            elif args.command == "info":
                info = await bot.rest.get_instance_info()
                print(json.dumps(info, indent=2, ensure_ascii=False))
        except EvangelineError as exc:
            logger.error(f"{exc}")
            return 1
    return 0


async def _listen(bot) -> int:
    @bot.on("ready")
    def ready() -> None:
        print(f"[evangeline] Connected as {bot.author!r}. Ctrl+C to quit.\n")

    @bot.on("messageCreate")
    def message_create(message) -> None:
        print(f"{message.author}: {message.content}")

    @bot.on("close")
    def closed(code: int, reason: str) -> None:
        print(f"[evangeline] Connection closed ({code}) {reason}".rstrip())

    await bot.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
