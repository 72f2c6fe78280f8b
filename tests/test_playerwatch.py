import json
import os
from unittest.mock import MagicMock, call

import pytest

from playerwatch import playerwatch as playerwatch_module
from playerwatch.playerwatch import PlayerWatch
from playerwatch.server_watch.rcon_client import RconClient


def write_configuration(folder_path, **overrides):
    json_configuration = {
        "general": {"verify_servers_on_start": False},
        "notification": {
            "type": "discord",
            "token": "token",
            "destination": 123456789,
            "prefix": "Now online:",
        },
        "servers": [
            {
                "name": "Factorio",
                "address": "127.0.0.1:27015",
                "password": "secret",
                "ignore": ["admin"],
                "seconds": 30,
            }
        ],
    }
    json_configuration.update(overrides)

    configuration_filepath = os.path.join(folder_path, "bot_configuration.json")
    with open(configuration_filepath, "w", encoding="utf-8") as file:
        json.dump(
            json_configuration,
            file,
            ensure_ascii=False,
            indent=4,
        )


def test_folder_initialization(tmp_path):
    os.chdir(tmp_path)

    assert len(os.listdir(tmp_path)) == 0

    PlayerWatch.initialize_folder()

    assert "start_bot.py" in os.listdir(tmp_path)
    assert "bot_configuration.json.example" in os.listdir(tmp_path)


def test_missing_configuration_is_created(tmp_path):
    with pytest.raises(FileNotFoundError):
        PlayerWatch(str(tmp_path))

    configuration_filepath = os.path.join(tmp_path, "bot_configuration.json")
    with open(configuration_filepath, "r", encoding="utf-8") as file:
        configuration_json = json.load(file)

    assert configuration_json["servers"][0]["address"] == "127.0.0.1:27015"


def test_valid_configuration(tmp_path):
    write_configuration(tmp_path)

    player_watch = PlayerWatch(str(tmp_path))

    assert [x.name() for x in player_watch.server_pollers()] == ["Factorio"]


@pytest.mark.parametrize(
    "servers",
    [
        [],
        [{"name": "", "address": "127.0.0.1:27015"}],
        [{"name": "Factorio", "address": ""}],
        [{"name": "Factorio", "address": "127.0.0.1"}],
        [{"name": "Factorio", "address": "127.0.0.1:27015", "seconds": 0}],
        [
            {"name": "Factorio", "address": "127.0.0.1:27015"},
            {"name": "Factorio", "address": "127.0.0.1:27016"},
        ],
    ],
)
def test_invalid_servers(tmp_path, servers):
    write_configuration(tmp_path, servers=servers)

    with pytest.raises(ValueError):
        PlayerWatch(str(tmp_path))


def test_invalid_notification(tmp_path):
    write_configuration(
        tmp_path, notification={"type": "irc", "token": "token", "destination": "1"}
    )

    with pytest.raises(ValueError):
        PlayerWatch(str(tmp_path))


def test_wrong_value_type(tmp_path):
    write_configuration(
        tmp_path,
        servers=[{"name": "Factorio", "address": "127.0.0.1:27015", "seconds": "often"}],
    )

    with pytest.raises(ValueError):
        PlayerWatch(str(tmp_path))


def test_unreachable_server(tmp_path, monkeypatch):
    write_configuration(tmp_path, general={"verify_servers_on_start": True})
    monkeypatch.setattr(RconClient, "check_connection", lambda self: False)

    with pytest.raises(ValueError):
        PlayerWatch(str(tmp_path))


def create_with_fakes(tmp_path, monkeypatch):
    write_configuration(tmp_path)

    parts = MagicMock()
    parts.poller.name.return_value = "Factorio"
    monkeypatch.setattr(
        playerwatch_module.ServerPollerFactory,
        "create_all",
        MagicMock(return_value=[parts.poller]),
    )
    monkeypatch.setattr(
        playerwatch_module.BotFactory, "create", MagicMock(return_value=parts.bot)
    )

    return PlayerWatch(str(tmp_path)), parts


def test_stop_stops_pollers_before_bot(tmp_path, monkeypatch):
    player_watch, parts = create_with_fakes(tmp_path, monkeypatch)

    player_watch.stop()

    stop_calls = [x for x in parts.mock_calls if x in (call.poller.stop(), call.bot.stop())]
    assert stop_calls == [call.poller.stop(), call.bot.stop()]


def test_bot_exit_stops_pollers(tmp_path, monkeypatch):
    player_watch, parts = create_with_fakes(tmp_path, monkeypatch)

    player_watch.start()

    parts.poller.start.assert_called_once_with()
    parts.bot.start.assert_called_once_with()
    parts.poller.stop.assert_called_once_with()
    parts.bot.stop.assert_called_once_with()
