"""
Reconnecting bot: the gateway never reconnects on its own.

This example reconnects after every close with a fixed delay, and uploads a
file when asked to.

Run:
    export EVANGELINE_AUTHOR="my bot"
    python examples/reconnecting_bot.py ./cat.png
"""

import asyncio
import os
import sys

from loguru import logger

from evangeline import Bot, ConnectionConfig

RECONNECT_DELAY = 5.0


async def main(upload_path: str) -> None:
    bot = Bot(os.environ["EVANGELINE_AUTHOR"], ConnectionConfig.from_env())

    @bot.on("messageCreate")
    async def on_message(message) -> None:
        if message.content == "!cat":
            data = await bot.upload_attachment(upload_path, spoiler=False)
            await bot.send(bot.attachment_url(data.id))

    async with bot:
        while True:
            await bot.run()
            logger.info(f"Disconnected, reconnecting in {RECONNECT_DELAY}s")
            await asyncio.sleep(RECONNECT_DELAY)


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1]))
