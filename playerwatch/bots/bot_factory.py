#!/usr/bin/env python

"""
playerwatch.bots.bot_factory
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Components for creation of bot instances.

"""

from typing import List

from playerwatch.bots.bot_base import BotBase, NotificationConfiguration
from playerwatch.bots.discord_bot import DiscordBot
from playerwatch.bots.telegram_bot import TelegramBot
from playerwatch.server_watch.server_poller import ServerPoller


class BotFactory:
    """
    A factory class for creating bot instances.
    """

    __supported_bots = {
        "discord": DiscordBot,
        "telegram": TelegramBot,
    }

    @staticmethod
    def validate(configuration: NotificationConfiguration) -> None:
        """
        Checks notification configuration.

        Parameters:
            `configuration` (NotificationConfiguration): configuration of bot

        Raises:
            ValueError: configuration is not usable
        """
        if configuration.type not in BotFactory.__supported_bots:
            if not configuration.type:
                raise ValueError("Empty bot type provided!")

            raise ValueError(f"Unknown bot type '{configuration.type}' provided!")

        if not configuration.token:
            raise ValueError("Bot token value is required!")

        if not configuration.destination:
            raise ValueError("Notification destination is required!")

        if configuration.notify_polling_seconds < 1:
            raise ValueError("Notification polling period must be at least 1 second!")

    @staticmethod
    def create(
        configuration: NotificationConfiguration, server_pollers: List[ServerPoller]
    ) -> BotBase:
        """
        Creates single instance of bot based on provided configuration.

        Parameters:
            `configuration` (NotificationConfiguration): configuration of bot
            `server_pollers` (list): list of watched servers

        Returns:
            bot: created instance
        """
        BotFactory.validate(configuration)

        return BotFactory.__supported_bots[configuration.type](
            configuration=configuration, server_pollers=server_pollers
        )
