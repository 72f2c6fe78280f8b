#!/usr/bin/env python

"""
playerwatch.server_watch.rcon_client
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Components for querying game servers over Source RCON.

"""

import logging
from typing import Tuple

from rcon.exceptions import EmptyResponse, SessionTimeout, WrongPassword
from rcon.source import Client

PLAYERS_COMMAND = "/players o"

QUERY_ERRORS = (OSError, EmptyResponse, SessionTimeout, WrongPassword)


class RconQueryError(Exception):
    """Raised when a game server can not be queried over RCON."""


def split_address(address: str) -> Tuple[str, int]:
    """
    Splits `host:port` address into its parts.

    Raises:
        ValueError: address has no host or no numeric port
    """
    host, separator, port = address.rpartition(":")
    if not separator or not host or not port.isdigit():
        raise ValueError(f"Address '{address}' must be in format 'host:port'!")

    return host, int(port)


class RconClient:
    """
    A class for sending commands to a single game server.

    Every call opens its own RCON session, which is closed once the response is read.
    """

    def __init__(self, address: str, password: str, timeout_seconds: int = 10):
        self.__host, self.__port = split_address(address)
        self.__password = password
        self.__timeout_seconds = timeout_seconds

    def __execute(self, command: str) -> str:
        try:
            with Client(
                self.__host,
                self.__port,
                timeout=self.__timeout_seconds,
                passwd=self.__password,
            ) as client:
                return client.run(command)

        except QUERY_ERRORS as exception:
            raise RconQueryError(
                f"Command '{command}' failed on {self.__host}:{self.__port}: {exception!r}"
            ) from exception

    def query_players(self) -> str:
        """
        Requests the list of online players.

        Returns:
            str: raw server response

        Raises:
            RconQueryError: connection, authentication or transfer failed
        """
        response = self.__execute(PLAYERS_COMMAND)

        logging.debug(
            "Response received from %s:%d, content: '%s'.",
            self.__host,
            self.__port,
            response,
        )

        return response

    def check_connection(self) -> bool:
        """
        Verifies that the server accepts the RCON password.

        Returns:
            bool: operation result
        """
        try:
            with Client(
                self.__host,
                self.__port,
                timeout=self.__timeout_seconds,
                passwd=self.__password,
            ):
                return True

        except QUERY_ERRORS as exception:
            logging.exception(exception)
            return False
