"""Toolkit for Discord bots: REST services, gateway data and dispatch, embeds, caching and config."""

__version__ = "0.1.0"