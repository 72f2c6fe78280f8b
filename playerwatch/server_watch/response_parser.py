#!/usr/bin/env python

"""
playerwatch.server_watch.response_parser
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Components for extracting player names from RCON responses.

"""

from typing import Iterable, List

ONLINE_PLAYERS_MARKER = "Online players"
ONLINE_SUFFIX = " (online)"


def parse_players(response: str, ignore: Iterable[str] = ()) -> List[str]:
    """
    Extracts player names from a `/players o` response.

    Every line after the first line starting with `Online players` is a player
    entry. A response without such line is treated as no players online.

    Parameters:
        `response` (str): raw RCON response
        `ignore` (Iterable[str]): player names which are always excluded

    Returns:
        list: player names in the order of the response
    """
    ignored_names = set(ignore)

    lines = response.split("\n")
    entries: List[str] = []
    for index, line in enumerate(lines):
        if line.startswith(ONLINE_PLAYERS_MARKER):
            entries = lines[index + 1 :]
            break

    players: List[str] = []
    for entry in entries:
        if entry == "":
            continue

        if entry.endswith(ONLINE_SUFFIX):
            entry = entry[: -len(ONLINE_SUFFIX)]

        if entry not in ignored_names:
            players.append(entry)

    return players
