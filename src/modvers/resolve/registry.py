"""Lookup of version strategies by method name."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modvers.config import ConfigError
from modvers.resolve.inprocess import InProcessLoad
from modvers.resolve.isolated import SubprocessLoad
from modvers.resolve.text import TextScan

if TYPE_CHECKING:
    from collections.abc import Sequence

    from modvers.resolve.base import VersionStrategy

STRATEGIES: dict[str, type[VersionStrategy]] = {
    TextScan.name: TextScan,
    InProcessLoad.name: InProcessLoad,
    SubprocessLoad.name: SubprocessLoad,
}


def create_strategy(
    method: str, search_path: Sequence[str], attributes: Sequence[str]
) -> VersionStrategy:
    """Instantiate the strategy registered under ``method``.

    Raises:
        ConfigError: If no strategy has that name.
    """
    try:
        strategy_cls = STRATEGIES[method]
    except KeyError:
        msg = (
            f"Unknown method '{method}'. "
            f"Valid methods: {', '.join(sorted(STRATEGIES))}"
        )
        raise ConfigError(msg) from None
    return strategy_cls(list(search_path), tuple(attributes))


__all__ = ["STRATEGIES", "create_strategy"]
