#!/usr/bin/env python

"""
playerwatch.server_watch.server_poller_factory
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Components for creation of server poller instances.

"""

from typing import List

from playerwatch.bots.bot_base import NotificationConfiguration
from playerwatch.server_watch.rcon_client import split_address
from playerwatch.server_watch.server_poller import ServerConfiguration, ServerPoller


class ServerPollerFactory:
    """
    A factory class for creating server poller instances.
    """

    @staticmethod
    def validate(configuration: ServerConfiguration) -> None:
        """
        Checks single server configuration.

        Parameters:
            `configuration` (ServerConfiguration): configuration of server

        Raises:
            ValueError: configuration is not usable
        """
        if not configuration.name:
            raise ValueError("Server name is required!")

        if not configuration.address:
            raise ValueError(f"Address of server '{configuration.name}' is required!")

        split_address(configuration.address)

        if configuration.seconds < 1:
            raise ValueError(
                f"Polling period of server '{configuration.name}' must be at least 1 second!"
            )

    @staticmethod
    def create(
        configuration: ServerConfiguration,
        notification: NotificationConfiguration,
        notify_callback,
    ) -> ServerPoller:
        """
        Creates single instance of server poller based on provided configuration.

        Parameters:
            `configuration` (ServerConfiguration): configuration of server
            `notification` (NotificationConfiguration): configuration of notifications
            `notify_callback` (callback_func): callback function for notifying about new players

        Returns:
            server_poller: created instance
        """
        ServerPollerFactory.validate(configuration)

        return ServerPoller(
            configuration=configuration,
            notification=notification,
            notify_callback=notify_callback,
        )

    @staticmethod
    def create_all(
        configuration_list: list,
        notification: NotificationConfiguration,
        notify_callback,
    ) -> List[ServerPoller]:
        """
        Creates list of server poller instances based on provided configuration.

        Parameters:
            `configuration_list` (list): list of server configuration
            `notification` (NotificationConfiguration): configuration of notifications
            `notify_callback` (callback_func): callback function for notifying about new players

        Returns:
            list: list of created instances
        """
        names = [configuration.name for configuration in configuration_list]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Server names must be unique: {', '.join(duplicates)}!")

        server_pollers: List[ServerPoller] = []

        for configuration in configuration_list:
            server_pollers.append(
                ServerPollerFactory.create(
                    configuration=configuration,
                    notification=notification,
                    notify_callback=notify_callback,
                )
            )

        return server_pollers
