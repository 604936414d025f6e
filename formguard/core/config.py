"""
Configuration for resolution, frame search and shadow piercing.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Tuple
import logging
import os

logger = logging.getLogger(__name__)

ENV_PREFIX = "FORMGUARD_"


@dataclass
class FormGuardConfig:
    """Configuration for the FormGuard controller and its layers."""
    timeout: float = 10.0  # Seconds a found element may take to become interactable
    poll_interval: float = 0.5
    form_wait: float = 3.0  # Seconds to look for the form in the main document
    form_locator: Optional[Tuple[str, str]] = ("id", "automationtestform")
    shadow_host_tag: str = "shadow-form"
    max_shadow_depth: int = 5
    closed_root_heuristic: bool = True
    screenshot_dir: str = "./formguard_reports"
    page_load_timeout: float = 30.0

    def validate(self) -> "FormGuardConfig":
        """Reject values the resolver cannot work with."""
        for name in ("timeout", "poll_interval", "page_load_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.form_wait < 0:
            raise ValueError(f"form_wait must not be negative, got {self.form_wait!r}")
        if self.max_shadow_depth < 1:
            raise ValueError(f"max_shadow_depth must be >= 1, got {self.max_shadow_depth!r}")
        return self

    def with_overrides(self, **overrides: Any) -> "FormGuardConfig":
        """Return a copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).validate()

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "FormGuardConfig":
        """
        Build a config from FORMGUARD_* environment variables.

        Example:
            FORMGUARD_TIMEOUT=20 FORMGUARD_FORM_LOCATOR="css selector=#signup"
        """
        environ = os.environ if environ is None else environ
        defaults = cls()
        values: Dict[str, Any] = {}

        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            raw = raw.strip()
            current = getattr(defaults, f.name)

            if f.name == "form_locator":
                values[f.name] = _parse_locator(raw)
            elif isinstance(current, bool):
                values[f.name] = raw.lower() in ("1", "true", "yes", "on")
            elif isinstance(current, int):
                values[f.name] = int(raw)
            elif isinstance(current, float):
                values[f.name] = float(raw)
            else:
                values[f.name] = raw

        if values:
            logger.debug(f"[FormGuardConfig] Environment overrides: {sorted(values)}")
        return cls(**values).validate()


def _parse_locator(raw: str) -> Optional[Tuple[str, str]]:
    """Parse 'by=value' (e.g. 'id=automationtestform'); 'none' disables the lookup."""
    if raw.lower() in ("", "none", "off"):
        return None
    if "=" not in raw:
        return ("id", raw)
    by, value = raw.split("=", 1)
    return (by.strip(), value.strip())
