"""
FormGuard - Resilient form-field resolution for browser UI tests.

Finds form controls through ordered fallback locators, across frames and
through (nested) shadow roots, without tying each test to one selector.
"""

__version__ = "0.1.0"

from formguard.core.config import FormGuardConfig
from formguard.layers.action import FormFieldController
from formguard.layers.shadow import ShadowPath

__all__ = [
    "FormFieldController",
    "FormGuardConfig",
    "ShadowPath",
    "__version__",
]
