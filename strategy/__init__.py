"""Strategy package for TIERARB."""

from strategy.decider import ArbitrageDecider, spread_bps

__all__ = [
    "ArbitrageDecider",
    "spread_bps",
]
