"""Errors raised while reading or writing feed documents."""

from __future__ import annotations

from pathlib import Path
from typing import Union


class FeedSieveError(RuntimeError):
    """Base class for fatal feed I/O failures."""

    action = "Processing"

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.action} failed for {self.path}: {reason}")


class ReadError(FeedSieveError):
    """The input feed is missing, unreadable or not well-formed XML."""

    action = "Reading feed"


class WriteError(FeedSieveError):
    """The filtered feed could not be serialised to its destination."""

    action = "Writing feed"


class ConfigError(FeedSieveError):
    """The configuration file is malformed or holds invalid values."""

    action = "Loading config"
