"""Dungeon Crawler: a turn-based text adventure for the terminal."""
