"""BlueRibbon Live: a proxy and display client for marker-filtered Twitch streams."""

__version__ = "0.1.0"
