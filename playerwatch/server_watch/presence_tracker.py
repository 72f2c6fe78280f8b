#!/usr/bin/env python

"""
playerwatch.server_watch.presence_tracker
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Components for remembering players that were already seen online.

"""

from typing import Iterable, List, Set


class PresenceTracker:
    """
    A class remembering every player ever seen online on a single game server.

    Players are never forgotten, so a player rejoining later is not reported again.
    """

    def __init__(self) -> None:
        self.__known_players: Set[str] = set()

    def __len__(self) -> int:
        return len(self.__known_players)

    def __contains__(self, player_name: object) -> bool:
        return player_name in self.__known_players

    def filter_new(self, player_names: Iterable[str]) -> List[str]:
        """
        Selects players that were not seen before and remembers them.

        A name repeated within `player_names` is returned only once.

        Parameters:
            `player_names` (Iterable[str]): players currently online

        Returns:
            list: newly seen players in their original order
        """
        new_players: List[str] = []

        for player_name in player_names:
            if player_name in self.__known_players:
                continue

            self.__known_players.add(player_name)
            new_players.append(player_name)

        return new_players
