"""
Hello World: the simplest evangeline example.

Run:
    python examples/hello_world.py
"""

import asyncio

from evangeline import Bot


async def main() -> None:
    bot = Bot("evangeline hello")

    @bot.on("ready")
    async def ready() -> None:
        await bot.send("woah, I'm alive!")

    @bot.on("messageCreate")
    def message_create(message) -> None:
        print(f"{message.author}> {message.content}")

    async with bot:
        await bot.run()


if __name__ == "__main__":
    asyncio.run(main())
