"""
Fallback Resolver - ordered locator strategies with an interactability wait.

Strategies are tried in declared order, most stable first. The first
candidate that becomes visible and enabled wins and later strategies are
never invoked, so a successful resolution is deterministic.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, TYPE_CHECKING
import logging

from selenium.common.exceptions import (
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.support.ui import WebDriverWait

from formguard.core.exceptions import ElementNotResolvable, NotInteractable
from formguard.layers.resolve.strategies import LocatorStrategy

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement

logger = logging.getLogger(__name__)

FOUND = "found"
NOT_FOUND = "not_found"
NOT_INTERACTABLE = "not_interactable"


@dataclass
class ResolutionAttempt:
    """What happened when one strategy was tried."""
    index: int
    strategy: str
    outcome: str
    error: Optional[BaseException] = None
    element: Optional[Any] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "strategy": self.strategy,
            "outcome": self.outcome,
            "error": str(self.error) if self.error else None,
        }


class FallbackResolver:
    """
    Resolve an element from an ordered list of strategies.

    Example:
        >>> resolver = FallbackResolver(driver, timeout=10)
        >>> field = resolver.resolve([by_id("fname"), by_name("First Name")])
        >>> field.send_keys("Jane")
    """

    def __init__(self, driver: "WebDriver", timeout: float = 10.0, poll_interval: float = 0.5):
        self.driver = driver
        self.timeout = timeout
        self.poll_interval = poll_interval

    def resolve(
        self,
        strategies: Sequence[LocatorStrategy],
        timeout: Optional[float] = None,
    ) -> "WebElement":
        """
        Return the first interactable element produced by the strategies.

        Raises:
            ElementNotResolvable: every strategy failed. The exception's
                ``attempts`` lists all of them; its cause is the first
                NotInteractable failure if any candidate was found, else
                the first failure.
        """
        timeout = self.timeout if timeout is None else timeout
        attempts: List[ResolutionAttempt] = []

        for index, strategy in enumerate(strategies):
            attempt = self._try(index, strategy, timeout)
            attempts.append(attempt)
            if attempt.outcome == FOUND:
                logger.debug(f"[FallbackResolver] Resolved via #{index} {strategy.name}")
                return attempt.element
            logger.debug(
                f"[FallbackResolver] Strategy #{index} {strategy.name} -> {attempt.outcome}"
            )

        error = ElementNotResolvable(attempts)
        raise error from self._most_informative(attempts)

    def try_resolve(
        self,
        strategies: Sequence[LocatorStrategy],
        timeout: Optional[float] = None,
    ) -> Optional["WebElement"]:
        """Like resolve() but return None when nothing resolves."""
        try:
            return self.resolve(strategies, timeout)
        except ElementNotResolvable as e:
            logger.debug(f"[FallbackResolver] {e}")
            return None

    def _try(self, index: int, strategy: LocatorStrategy, timeout: float) -> ResolutionAttempt:
        try:
            candidate = strategy.attempt(self.driver)
        except WebDriverException as e:
            return ResolutionAttempt(index, strategy.name, NOT_FOUND, e)

        if candidate is None:
            return ResolutionAttempt(index, strategy.name, NOT_FOUND)

        try:
            self._wait_interactable(candidate, strategy.name, timeout)
        except NotInteractable as e:
            return ResolutionAttempt(index, strategy.name, NOT_INTERACTABLE, e)

        return ResolutionAttempt(index, strategy.name, FOUND, element=candidate)

    def _wait_interactable(self, element: "WebElement", name: str, timeout: float) -> None:
        try:
            WebDriverWait(
                self.driver, timeout, poll_frequency=self.poll_interval
            ).until(lambda _: element.is_displayed() and element.is_enabled())
        except (TimeoutException, StaleElementReferenceException) as e:
            raise NotInteractable(name, timeout) from e

    @staticmethod
    def _most_informative(attempts: Sequence[ResolutionAttempt]) -> Optional[BaseException]:
        for attempt in attempts:
            if attempt.outcome == NOT_INTERACTABLE:
                return attempt.error
        for attempt in attempts:
            if attempt.error is not None:
                return attempt.error
        return None

