"""Core module - Configuration, errors, frames and driver management."""

from formguard.core.config import FormGuardConfig
from formguard.core.driver_factory import create_driver, driver_session
from formguard.core.exceptions import (
    ElementNotResolvable,
    FormGuardError,
    FrameSwitchFailed,
    NotInteractable,
    ShadowPierceFailed,
)
from formguard.core.frames import FrameNavigator

__all__ = [
    "ElementNotResolvable",
    "FormGuardConfig",
    "FormGuardError",
    "FrameNavigator",
    "FrameSwitchFailed",
    "NotInteractable",
    "ShadowPierceFailed",
    "create_driver",
    "driver_session",
]
