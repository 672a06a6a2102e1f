"""Guild jukebox: a per-guild Discord music queue bot."""

__version__ = "0.1.0"
