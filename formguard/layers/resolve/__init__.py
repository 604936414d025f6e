"""Resolve Layer - Ordered fallback locators for the regular DOM."""

from formguard.layers.resolve.fallback import FallbackResolver, ResolutionAttempt
from formguard.layers.resolve.strategies import (
    Locate,
    LocatorStrategy,
    ScriptLocate,
    by_css,
    by_id,
    by_name,
    by_xpath,
)

__all__ = [
    "FallbackResolver",
    "Locate",
    "LocatorStrategy",
    "ResolutionAttempt",
    "ScriptLocate",
    "by_css",
    "by_id",
    "by_name",
    "by_xpath",
]
