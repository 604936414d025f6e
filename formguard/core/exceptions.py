"""
Error taxonomy for element resolution.

Regular-DOM writes surface ElementNotResolvable; shadow-DOM operations
report a PierceOutcome instead and only raise ShadowPierceFailed when the
caller asks for it.
"""

from typing import Any, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from formguard.layers.resolve.fallback import ResolutionAttempt
    from formguard.layers.shadow.piercer import PierceOutcome


class FormGuardError(Exception):
    """Base class for all FormGuard errors."""


class NotInteractable(FormGuardError):
    """An element was found but never became visible and enabled in time."""

    def __init__(self, strategy: str, timeout: float):
        self.strategy = strategy
        self.timeout = timeout
        super().__init__(
            f"Element found by '{strategy}' was not visible and enabled within {timeout}s"
        )


class ElementNotResolvable(FormGuardError):
    """Every locator strategy was tried and none produced an interactable element."""

    def __init__(self, attempts: List["ResolutionAttempt"], message: Optional[str] = None):
        self.attempts = list(attempts)
        if message is None:
            names = ", ".join(a.strategy for a in self.attempts) or "<none>"
            message = (
                f"Element could not be found with any of {len(self.attempts)} "
                f"strategies ({names})"
            )
        super().__init__(message)


class ShadowPierceFailed(FormGuardError):
    """
    Best-effort shadow traversal finished without a match.

    Not necessarily a bug: a closed shadow root cannot be entered from
    outside the page's own scripts.
    """

    def __init__(self, outcome: "PierceOutcome"):
        self.outcome = outcome
        errors = [s.error for s in outcome.strategies if s.error]
        detail = f" (last error: {errors[-1]})" if errors else ""
        super().__init__(
            f"{outcome.operation} could not reach '{outcome.target}' via "
            f"{len(outcome.strategies)} strategies{detail}"
        )


class FrameSwitchFailed(FormGuardError):
    """Switching into, or restoring out of, a frame failed."""

    def __init__(self, frame: Any, reason: str):
        self.frame = frame
        self.reason = reason
        super().__init__(f"Frame switch failed for {frame!r}: {reason}")
