"""GitHub webhook to Telegram notification bridge."""

__version__ = "0.4.0"
