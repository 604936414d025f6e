"""Shadow Layer - Piercing open, nested and (best effort) closed shadow roots."""

from formguard.layers.shadow.path import ShadowPath
from formguard.layers.shadow.piercer import (
    PierceOutcome,
    ShadowCensus,
    ShadowLookup,
    ShadowPiercer,
    StrategyOutcome,
)

__all__ = [
    "PierceOutcome",
    "ShadowCensus",
    "ShadowLookup",
    "ShadowPath",
    "ShadowPiercer",
    "StrategyOutcome",
]
