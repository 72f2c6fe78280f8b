#!/usr/bin/env python

import json
import logging
import os
import pathlib
import shutil
import threading
from dataclasses import dataclass, field
from importlib import metadata
from logging.handlers import TimedRotatingFileHandler
from typing import List, Optional

from dacite import Config, DaciteError, from_dict

from playerwatch.bots.bot_base import BotBase, NotificationConfiguration
from playerwatch.bots.bot_factory import BotFactory
from playerwatch.server_watch.server_poller import ServerConfiguration, ServerPoller
from playerwatch.server_watch.server_poller_factory import ServerPollerFactory

CONFIGURATION_FILENAME = "bot_configuration.json"
CONFIGURATION_EXAMPLE_FILENAME = "bot_configuration.json.example"


@dataclass
class GeneralConfiguration:
    logs_folder_path: str = ""
    verify_servers_on_start: bool = True


@dataclass
class PlayerWatchConfiguration:
    general: GeneralConfiguration = field(default_factory=GeneralConfiguration)
    notification: NotificationConfiguration = field(
        default_factory=NotificationConfiguration
    )
    servers: List[ServerConfiguration] = field(default_factory=list)


class PlayerWatch:
    def __init__(self, working_folder_path: str):
        if not working_folder_path:
            raise ValueError("Working directory value is required for playerwatch start!")

        self.__working_folder_path = working_folder_path
        self.__configuration: PlayerWatchConfiguration = (
            self.__parse_configuration_json_file()
        )

        self.__initialize_logging()

        if len(self.__configuration.servers) == 0:
            raise ValueError("At least one server is required!")

        BotFactory.validate(self.__configuration.notification)

        self.__server_pollers: List[ServerPoller] = ServerPollerFactory.create_all(
            configuration_list=self.__configuration.servers,
            notification=self.__configuration.notification,
            notify_callback=self.__notify_callback,
        )

        if self.__configuration.general.verify_servers_on_start:
            for server_poller in self.__server_pollers:
                logging.info("Verifying server '%s'.", server_poller.name())
                if not server_poller.check_connection():
                    raise ValueError(
                        f"Could not connect to server '{server_poller.name()}'!"
                    )

        self.__bot: BotBase = BotFactory.create(
            configuration=self.__configuration.notification,
            server_pollers=self.__server_pollers,
        )
        self.__bot_thread: Optional[threading.Thread] = None
        self.__stopping_event = threading.Event()

    def __parse_configuration_json_file(self) -> PlayerWatchConfiguration:
        configuration_filepath = os.path.join(
            self.__working_folder_path, CONFIGURATION_FILENAME
        )

        #
        # Create configuration from example on first start.
        #
        if not os.path.exists(configuration_filepath):
            current_script_folder = os.path.dirname(os.path.realpath(__file__))
            shutil.copyfile(
                os.path.join(
                    current_script_folder,
                    "templates",
                    "common",
                    CONFIGURATION_EXAMPLE_FILENAME,
                ),
                configuration_filepath,
            )
            raise FileNotFoundError(
                f"'{configuration_filepath}' was not found, "
                "created a new one from example, please fill it in."
            )

        with open(configuration_filepath, "r", encoding="utf-8") as json_file:
            configuration_json = json.load(json_file)

        try:
            configuration = from_dict(
                data_class=PlayerWatchConfiguration,
                data=configuration_json,
                config=Config(cast=[str]),
            )
        except DaciteError as exception:
            raise ValueError(
                f"Invalid configuration in '{configuration_filepath}': {exception}"
            ) from exception

        return configuration

    def __initialize_logging(self) -> None:
        #
        # Enable daily logging both to file and stdout.
        #
        log_directory = os.path.join(self.__working_folder_path, "logs")
        if os.path.isabs(self.__configuration.general.logs_folder_path):
            log_directory = self.__configuration.general.logs_folder_path

        pathlib.Path(log_directory).mkdir(parents=True, exist_ok=True)

        filename = "playerwatch.log"
        filepath = os.path.join(log_directory, filename)

        handler = TimedRotatingFileHandler(filepath, when="midnight", backupCount=60)
        handler.suffix = "%Y%m%d"

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s:%(levelname)s:%(funcName)s(): %(message)s",
            handlers=[handler, logging.StreamHandler()],
        )

    def __notify_callback(self, destination: str, title: str, message: str) -> None:
        self.__bot.notify(destination, title, message)

    def server_pollers(self) -> List[ServerPoller]:
        return list(self.__server_pollers)

    def start(self) -> None:
        try:
            playerwatch_version = metadata.version("playerwatch")
            logging.info("playerwatch v%s was started.", playerwatch_version)
        except metadata.PackageNotFoundError:
            logging.debug("playerwatch was started.")

        for server_poller in self.__server_pollers:
            logging.info("Starting player check of '%s'.", server_poller.name())
            server_poller.start()

        #
        # Run bot in separate thread so signals are still handled by main thread.
        #
        self.__bot_thread = threading.Thread(target=self.__bot.start)
        self.__bot_thread.start()
        self.__bot_thread.join()

        if not self.__stopping_event.is_set():
            logging.error("Bot stopped unexpectedly, stopping player checks.")
            self.stop()

    def stop(self) -> None:
        self.__stopping_event.set()
        logging.info("playerwatch is shutting down.")

        for server_poller in self.__server_pollers:
            server_poller.stop()

        self.__bot.stop()

    @staticmethod
    def initialize_folder() -> None:
        """
        Copies start script and example configuration into current working folder.
        """
        current_script_folder = os.path.dirname(os.path.realpath(__file__))
        current_working_folder = os.getcwd()
        shutil.copytree(
            os.path.join(current_script_folder, "templates", "common"),
            current_working_folder,
            dirs_exist_ok=True,
        )
