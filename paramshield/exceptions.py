"""Exceptions raised by paramshield."""


class ConfigurationError(ValueError):
    """Raised when a sanitizer is built with options it cannot honour."""
