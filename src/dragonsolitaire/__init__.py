"""Dragon Solitaire: a single-player card dungeon crawl."""

__version__ = "0.1.0"
