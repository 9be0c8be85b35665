"""Dungeon Crawler launcher. Starts an interactive game in this terminal."""

import sys

from dungeon_crawler.console import main

if __name__ == "__main__":
    sys.exit(main())
