#!/usr/bin/env python

"""
playerwatch.bots.bot_base
~~~~~~~~~~~~~~~~~~~~~~~~~

Base components of bot instances.

"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


@dataclass
class BotForwardMessage:
    """Class describing parameters of messages to be delivered to chats."""

    destination: str = ""
    """The chat or channel the message is delivered to."""

    title: str = ""
    """The title of message."""

    message: str = ""
    """The body of message."""


@dataclass
class NotificationConfiguration:
    """Class describing parameters of the notification bot."""

    type: str = ""
    """The type of the bot. Allowed values: `discord`, `telegram`."""

    token: str = ""
    """The authentication token required for the bot."""

    destination: str = ""
    """The chat ID (Telegram) or channel ID (Discord) receiving notifications."""

    prefix: str = "Now online:"
    """The text placed in front of the list of new players."""

    notify_polling_seconds: int = 5
    """The period in seconds for forwarding messages from queue to the destination."""


class BotBase(ABC):
    """
    A base class for bot objects.
    """

    def __init__(self, configuration: NotificationConfiguration, server_pollers: list):
        self._configuration = configuration
        self._server_pollers = server_pollers

        self._notify_mutex = threading.Lock()
        self._notify_messages: List[BotForwardMessage] = []

        self._emoji_attention = "\U000026A0"

    def _pop_notify_messages(self) -> List[BotForwardMessage]:
        with self._notify_mutex:
            local_notify_messages = self._notify_messages
            self._notify_messages = []

        return local_notify_messages

    def notify(self, destination: str, title: str, message: str) -> None:
        """
        Forwards a new message to be sent by bot to the destination chat.

        The message is queued and delivered by the bot's own loop.

        Parameters:
            `destination` (str): chat or channel ID
            `title` (str): title of message
            `message` (str): body of message
        """
        with self._notify_mutex:
            self._notify_messages.append(
                BotForwardMessage(destination=destination, title=title, message=message)
            )

    @abstractmethod
    def start(self) -> None:
        """
        Starts the bot. Blocking call.
        """

    @abstractmethod
    def stop(self) -> None:
        """
        Requests the bot to stop, makes `start()` return.
        """
