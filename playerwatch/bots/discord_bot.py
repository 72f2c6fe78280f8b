#!/usr/bin/env python

"""
playerwatch.bots.discord_bot
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Components for managing Discord bot.

"""

import asyncio
import logging
import threading
from typing import List

import hikari

from playerwatch.bots.bot_base import BotBase, NotificationConfiguration
from playerwatch.server_watch.server_poller import ServerPoller


class DiscordBot(BotBase):
    """
    A class forwarding notifications to a Discord channel over REST API.
    """

    def __init__(
        self,
        configuration: NotificationConfiguration,
        server_pollers: List[ServerPoller],
    ):
        super().__init__(configuration=configuration, server_pollers=server_pollers)

        logging.getLogger("hikari").setLevel(logging.WARNING)

        self.__color_orange = 0xE67E22
        self.__stopping_event = threading.Event()

    async def __notify_loop(self, client) -> None:
        local_notify_messages = self._pop_notify_messages()

        for notify_message in local_notify_messages:
            embed = hikari.Embed(
                title=notify_message.title,
                description=f":warning: {notify_message.message}",
                color=hikari.colors.Color(self.__color_orange),
            )

            try:
                await client.create_message(
                    channel=int(notify_message.destination), embed=embed
                )
            except (hikari.errors.HikariError, OSError, ValueError) as exception:
                logging.exception(exception)

    async def __run(self) -> None:
        rest = hikari.RESTApp()
        await rest.start()

        try:
            async with rest.acquire(self._configuration.token, hikari.TokenType.BOT) as client:
                logging.info("Discord bot started.")

                while not self.__stopping_event.is_set():
                    await self.__notify_loop(client)
                    await asyncio.sleep(self._configuration.notify_polling_seconds)

                # Deliver what was queued during shutdown.
                await self.__notify_loop(client)

        finally:
            await rest.close()

    def start(self) -> None:
        self.__stopping_event.clear()

        try:
            asyncio.run(self.__run())
        except Exception as exception:
            logging.exception(exception)

    def stop(self) -> None:
        self.__stopping_event.set()
