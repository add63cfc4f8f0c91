#!/usr/bin/env python3
"""
BOX_RUSH Launcher
==================
Run this script to start the game.
"""

from box_rush.main import main

if __name__ == "__main__":
    main()
