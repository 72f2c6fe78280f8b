#!/usr/bin/env python

"""
playerwatch.server_watch.server_poller
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Components for periodic polling of a single game server.

"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from playerwatch.bots.bot_base import NotificationConfiguration
from playerwatch.server_watch.presence_tracker import PresenceTracker
from playerwatch.server_watch.rcon_client import RconClient
from playerwatch.server_watch.response_parser import parse_players


@dataclass
class ServerConfiguration:
    """Class describing parameters of a watched game server."""

    name: str = ""
    """The readable name of the server, used as notification title."""

    address: str = ""
    """The RCON address of the server in format `host:port`."""

    password: str = ""
    """The RCON password of the server."""

    ignore: list = field(default_factory=list)
    """The list of player names that are never reported."""

    seconds: int = 60
    """The period in seconds between two polls of the server."""

    timeout_seconds: int = 10
    """The timeout in seconds for getting a response from the server."""


NotifyCallback = Callable[[str, str, str], None]


class ServerPoller:
    """
    A class polling a single game server and reporting newly joined players.
    """

    def __init__(
        self,
        configuration: ServerConfiguration,
        notification: NotificationConfiguration,
        notify_callback: NotifyCallback,
        rcon_client: Optional[RconClient] = None,
    ):
        if configuration.seconds < 1:
            raise ValueError(
                f"Polling period of server '{configuration.name}' must be at least 1 second!"
            )

        self.__configuration = configuration
        self.__notification = notification
        self.__notify_callback = notify_callback

        if rcon_client is None:
            rcon_client = RconClient(
                address=configuration.address,
                password=configuration.password,
                timeout_seconds=configuration.timeout_seconds,
            )
        self.__rcon_client = rcon_client

        self.__presence_tracker = PresenceTracker()
        self.__online_players: List[str] = []

        self.__stopping_event = threading.Event()
        self.__polling_thread: Optional[threading.Thread] = None

    def name(self) -> str:
        """
        States server name.

        Returns:
            server_name (str)
        """
        return self.__configuration.name

    def online_players(self) -> List[str]:
        """
        Returns players reported online by the latest successful poll.

        Returns:
            list: player names
        """
        return list(self.__online_players)

    def check_connection(self) -> bool:
        return self.__rcon_client.check_connection()

    def run_once(self) -> None:
        """
        Executes one poll cycle: query, parse, filter and notify.

        A failed query leaves the remembered players untouched.
        """
        logging.debug("Checking for new players on '%s'.", self.name())

        try:
            response = self.__rcon_client.query_players()
        except Exception as exception:
            logging.exception(exception)
            return

        players = parse_players(response, self.__configuration.ignore)
        self.__online_players = players

        new_players = self.__presence_tracker.filter_new(players)
        if len(new_players) == 0:
            return

        message = f"{self.__notification.prefix} {', '.join(new_players)}"
        logging.info("New players on '%s': %s.", self.name(), ", ".join(new_players))

        try:
            self.__notify_callback(
                self.__notification.destination, self.name(), message
            )
        except Exception as exception:
            logging.exception(exception)

    def _poll(self, stopping_event: threading.Event) -> None:
        logging.debug("Polling thread of '%s' started.", self.name())

        while not stopping_event.wait(self.__configuration.seconds):
            self.run_once()

        logging.debug("Polling thread of '%s' stopped.", self.name())

    def start(self) -> None:
        """
        Starts polling in a separate thread. The first poll happens after one period.

        A polling thread still finishing its last cycle after `stop()` is joined first.
        """
        if self.__polling_thread is not None:
            if not self.__stopping_event.is_set():
                return

            self.__polling_thread.join()
            self.__polling_thread = None

        self.__stopping_event = threading.Event()
        self.__polling_thread = threading.Thread(
            target=self._poll,
            args=(self.__stopping_event,),
            name=f"poller-{self.name()}",
        )
        self.__polling_thread.daemon = True
        self.__polling_thread.start()

    def stop(self, timeout_seconds: Optional[float] = None) -> None:
        """
        Stops polling. A poll cycle in progress is finished before return.

        Parameters:
            `timeout_seconds` (float): maximum time to wait for the polling thread
        """
        self.__stopping_event.set()

        if self.__polling_thread is not None:
            self.__polling_thread.join(timeout_seconds)
            if not self.__polling_thread.is_alive():
                self.__polling_thread = None
