#!/usr/bin/env python

"""
playerwatch.bots.telegram_bot
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Components for managing Telegram bot.

"""

import asyncio
import logging
import threading
from typing import List, Optional

import nest_asyncio  # type: ignore
from telegram import BotCommand, Update
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.helpers import escape_markdown

from playerwatch.bots.bot_base import BotBase, NotificationConfiguration
from playerwatch.server_watch.server_poller import ServerPoller


class TelegramBot(BotBase):
    """
    A class for managing Telegram bot.
    """

    def __init__(
        self,
        configuration: NotificationConfiguration,
        server_pollers: List[ServerPoller],
    ):
        super().__init__(configuration=configuration, server_pollers=server_pollers)

        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("telegram").setLevel(logging.WARNING)

        self.__loop: Optional[asyncio.AbstractEventLoop] = None
        self.__stopping_event = threading.Event()

        self.__bot = (
            Application.builder()
            .token(self._configuration.token)
            .post_init(self.__publish_commands)
            .build()
        )

        self.__bot.add_handler(CommandHandler("players", self.__players))

        job_queue = self.__bot.job_queue
        job_queue.run_repeating(  # type: ignore
            self.__notify_loop,
            interval=self._configuration.notify_polling_seconds,
            first=0,
        )

    async def __publish_commands(self, application: Application) -> None:
        commands = [
            BotCommand("players", "Lists players currently online on watched servers."),
        ]
        await application.bot.set_my_commands(commands)

    async def __players(self, update: Update, _: ContextTypes.DEFAULT_TYPE) -> None:
        if update.effective_message is None or update.effective_message.chat_id is None:
            logging.critical("No chat_id in incoming message!")
            return

        chat_id = update.effective_message.chat_id
        username = None
        if update.effective_user is not None:
            username = update.effective_user.username

        if str(chat_id) != self._configuration.destination:
            logging.error(
                "Called 'players' by '%s' in not allowed chat '%s'.", username, chat_id
            )
            return

        logging.debug("Called 'players' by '%s'.", username)

        lines: List[str] = []
        for server_poller in self._server_pollers:
            players = server_poller.online_players()
            players_text = ", ".join(players) if players else "nobody"
            lines.append(
                f"*{escape_markdown(text=server_poller.name(), version=2)}*: "
                f"{escape_markdown(text=players_text, version=2)}"
            )

        await update.effective_message.reply_text(
            text="\n".join(lines),
            parse_mode=ParseMode.MARKDOWN_V2,
        )

    async def __notify_loop(self, context: ContextTypes.DEFAULT_TYPE) -> None:
        local_notify_messages = self._pop_notify_messages()

        for notify_message in local_notify_messages:
            try:
                await context.bot.send_message(
                    notify_message.destination,
                    text=f"__*{escape_markdown(text=notify_message.title, version=2)}*__"
                    f"\n{self._emoji_attention} {escape_markdown(text=notify_message.message, version=2)}",
                    parse_mode=ParseMode.MARKDOWN_V2,
                )
            except TelegramError as exception:
                logging.exception(exception)

        # Stop requested before polling was running.
        if self.__stopping_event.is_set():
            self.__bot.stop_running()

    #
    # A bit of tricky solution to run python-telegram-bot in separate thread.
    #
    async def __start_bot(self) -> None:
        self.__bot.run_polling(
            allowed_updates=Update.ALL_TYPES,
            close_loop=False,
            stop_signals=None,
            drop_pending_updates=True,
        )

    def start(self) -> None:
        if self.__stopping_event.is_set():
            return

        nest_asyncio.apply()

        try:
            self.__loop = asyncio.new_event_loop()
            asyncio.set_event_loop(self.__loop)
            self.__loop.run_until_complete(self.__start_bot())
            self.__loop.close()

        except Exception as exception:
            logging.exception(exception)

    def stop(self) -> None:
        self.__stopping_event.set()

        if self.__loop is not None and self.__bot.running:
            self.__loop.call_soon_threadsafe(self.__bot.stop_running)
