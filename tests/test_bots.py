import asyncio
from unittest.mock import AsyncMock, MagicMock

import hikari
import pytest
from telegram.error import TelegramError

from playerwatch.bots.bot_base import BotBase, NotificationConfiguration
from playerwatch.bots.bot_factory import BotFactory
from playerwatch.bots.discord_bot import DiscordBot


class QueueBot(BotBase):
    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    def pop(self):
        return self._pop_notify_messages()


def test_notify_queues_messages():
    bot = QueueBot(configuration=NotificationConfiguration(), server_pollers=[])

    bot.notify("-100", "Factorio", "Now online: Alice")
    bot.notify("-100", "Factorio", "Now online: Bob")

    messages = bot.pop()

    assert [message.message for message in messages] == [
        "Now online: Alice",
        "Now online: Bob",
    ]
    assert messages[0].destination == "-100"
    assert messages[0].title == "Factorio"
    assert bot.pop() == []


@pytest.mark.parametrize(
    "configuration",
    [
        NotificationConfiguration(type="", token="token", destination="1"),
        NotificationConfiguration(type="irc", token="token", destination="1"),
        NotificationConfiguration(type="telegram", token="", destination="1"),
        NotificationConfiguration(type="telegram", token="token", destination=""),
        NotificationConfiguration(
            type="discord", token="token", destination="1", notify_polling_seconds=0
        ),
    ],
)
def test_invalid_configuration(configuration):
    with pytest.raises(ValueError):
        BotFactory.create(configuration=configuration, server_pollers=[])


def test_discord_bot_creation():
    bot = BotFactory.create(
        configuration=NotificationConfiguration(
            type="discord", token="token", destination="123456789"
        ),
        server_pollers=[],
    )

    assert isinstance(bot, DiscordBot)


def test_telegram_failed_send_is_dropped():
    bot = BotFactory.create(
        configuration=NotificationConfiguration(
            type="telegram", token="123456:ABCDEF", destination="-100"
        ),
        server_pollers=[],
    )
    context = MagicMock()
    context.bot.send_message = AsyncMock(side_effect=[TelegramError("Timed out"), None])

    bot.notify("-100", "Factorio", "Now online: Alice")
    bot.notify("-100", "Factorio", "Now online: Bob")
    asyncio.run(bot._TelegramBot__notify_loop(context))

    assert context.bot.send_message.await_count == 2
    assert "Bob" in context.bot.send_message.await_args.kwargs["text"]
    assert bot._pop_notify_messages() == []


def test_discord_failed_send_is_dropped():
    bot = BotFactory.create(
        configuration=NotificationConfiguration(
            type="discord", token="token", destination="123456789"
        ),
        server_pollers=[],
    )
    client = MagicMock()
    client.create_message = AsyncMock(
        side_effect=[hikari.errors.HikariError("Forbidden"), None]
    )

    bot.notify("123456789", "Factorio", "Now online: Alice")
    bot.notify("123456789", "Factorio", "Now online: Bob")
    asyncio.run(bot._DiscordBot__notify_loop(client))

    assert client.create_message.await_count == 2
    assert client.create_message.await_args.kwargs["channel"] == 123456789
    assert client.create_message.await_args.kwargs["embed"].title == "Factorio"


def test_telegram_stop_before_start():
    bot = BotFactory.create(
        configuration=NotificationConfiguration(
            type="telegram", token="123456:ABCDEF", destination="-100"
        ),
        server_pollers=[],
    )

    bot.stop()
    bot.start()
