"""
Echo bot: production entry point.

Reads config from environment variables (.env file or system env).
Replies to any message starting with the command prefix.
"""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv  # pip install python-dotenv
from loguru import logger

# Load .env from current directory or parent
load_dotenv()


def _require(key: str) -> str:
    val = os.getenv(key, "").strip()
    if not val:
        print(f"ERROR: {key} is not set. Copy .env.example to .env and fill in values.")
        sys.exit(1)
    return val


async def main() -> None:
    from evangeline import Bot, ConnectionConfig, Message

    author = _require("EVANGELINE_AUTHOR")
    prefix = os.getenv("COMMAND_PREFIX", "!")

    bot = Bot(author, ConnectionConfig.from_env())

    @bot.on("ready")
    def ready() -> None:
        logger.info(f"Connected as {bot.author!r}")

    @bot.on("messageCreate")
    async def echo(message: Message) -> None:
        # Don't answer ourselves
        if message.author == bot.author or not message.content.startswith(prefix):
            return
        command, _, rest = message.content[len(prefix):].partition(" ")
        if command == "ping":
            await bot.send("pong")
        elif command == "echo" and rest:
            await bot.send(rest)

    @bot.on("error")
    def error(cause: Exception) -> None:
        logger.warning(f"Gateway error: {cause}")

    @bot.on("close")
    def closed(code: int, reason: str) -> None:
        logger.info(f"Gateway closed ({code}) {reason}")

    async with bot:
        await bot.run()


if __name__ == "__main__":
    # Configure loguru
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
        level=os.getenv("LOG_LEVEL", "INFO"),
    )
    logger.add(
        Path("~/.evangeline/evangeline.log").expanduser(),
        rotation="10 MB",
        retention="7 days",
        level="DEBUG",
    )

    asyncio.run(main())
