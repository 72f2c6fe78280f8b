#!/usr/bin/env python

import logging
import os
import signal

from playerwatch.playerwatch import PlayerWatch


if __name__ == "__main__":
    bot = PlayerWatch(os.path.dirname(os.path.realpath(__file__)))

    def shutdown_signal_handler(_1, _2):
        logging.critical("Caught shutdown signal, playerwatch will be shut down.")
        bot.stop()

    #
    # Catch Ctrl+C and service stop for stopping pollers before exit.
    #
    signal.signal(signal.SIGINT, shutdown_signal_handler)
    signal.signal(signal.SIGTERM, shutdown_signal_handler)

    bot.start()
