"""Version resolution strategies."""

from modvers.resolve.base import LoadInterrupted, ProtocolError, VersionStrategy
from modvers.resolve.inprocess import InProcessLoad
from modvers.resolve.isolated import SubprocessLoad
from modvers.resolve.registry import STRATEGIES, create_strategy
from modvers.resolve.text import TextScan

__all__ = [
    "InProcessLoad",
    "LoadInterrupted",
    "ProtocolError",
    "STRATEGIES",
    "SubprocessLoad",
    "TextScan",
    "VersionStrategy",
    "create_strategy",
]
