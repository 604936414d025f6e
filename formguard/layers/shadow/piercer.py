"""
Shadow Piercer - Finding and mutating elements behind shadow roots.

Lookups walk open shadow roots from Python with an explicit stack, a
visited set keyed by element id and a depth bound. Mutations run as page
scripts through three strategies in fixed priority; each strategy is
isolated so one failure never stops the next, and the caller receives a
PierceOutcome instead of an exception.

Closed shadow roots are not reachable from outside the page. When the
walk met closed hosts and the target is a bare "#ident", the piercer can
fall back to an attribute scan that only accepts elements living inside
those hosts' roots. That is a best-effort heuristic which only succeeds
when the browser exposes the element at attribute level; light-DOM
elements are never returned and the target is otherwise reported as not
found.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union, TYPE_CHECKING
import logging
import re

from selenium.common.exceptions import NoSuchShadowRootException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement

from formguard.core.exceptions import ShadowPierceFailed
from formguard.layers.shadow import scripts
from formguard.layers.shadow.path import ShadowPath

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.shadowroot import ShadowRoot

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5

# Mutation kinds understood by scripts.MUTATION_PRELUDE
SET_VALUE = "value"
SET_CHECKED = "checked"
SELECT_OPTION = "option"

# Routes by which a lookup can succeed
OPEN_ROOT = "open_root"
ATTRIBUTE_SCAN = "attribute_scan"

# Targets eligible for the attribute scan: a bare "#ident"
ID_SELECTOR = re.compile(r"^#([\w-]+)$")

HostRef = Union[str, WebElement, None]


@dataclass
class StrategyOutcome:
    """Result of one mutation strategy."""
    name: str
    succeeded: bool
    matched: int = 0
    depth: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "succeeded": self.succeeded,
            "matched": self.matched,
            "depth": self.depth,
            "error": self.error,
        }


@dataclass
class PierceOutcome:
    """
    Structured result of a shadow-DOM mutation.

    ``strategies`` holds every strategy that was tried, in order; the
    last one is the winner when ``succeeded`` is true.
    """
    operation: str
    target: str
    strategies: List[StrategyOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return any(s.succeeded for s in self.strategies)

    @property
    def winner(self) -> Optional[str]:
        for s in self.strategies:
            if s.succeeded:
                return s.name
        return None

    def raise_for_status(self) -> "PierceOutcome":
        """Raise ShadowPierceFailed unless a strategy succeeded."""
        if not self.succeeded:
            raise ShadowPierceFailed(self)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "target": self.target,
            "succeeded": self.succeeded,
            "winner": self.winner,
            "strategies": [s.to_dict() for s in self.strategies],
        }


@dataclass
class ShadowLookup:
    """Result of locate_in_shadow()."""
    element: Optional[WebElement]
    depth: Optional[int] = None
    route: Optional[str] = None
    visited_hosts: int = 0
    closed_hosts: int = 0
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.element is not None


@dataclass
class ShadowCensus:
    """Counts describing a page's shadow structure."""
    total_elements: int = 0
    custom_hosts: int = 0
    inputs: int = 0
    open_hosts: List[str] = field(default_factory=list)
    error: Optional[str] = None


class ShadowPiercer:
    """
    Locate and mutate elements inside (nested) shadow roots.

    Example:
        >>> piercer = ShadowPiercer(driver)
        >>> outcome = piercer.set_value_in_shadow("#fname", "Jane")
        >>> outcome.winner
        'host_query'
        >>> piercer.find_in_shadow("shadow-form", "#fname")
        <selenium.webdriver.remote.webelement.WebElement ...>
    """

    def __init__(
        self,
        driver: "WebDriver",
        host_tag: str = "shadow-form",
        max_depth: int = DEFAULT_MAX_DEPTH,
        closed_root_heuristic: bool = True,
        known_hosts: Sequence[str] = ("shadow-form", "nestedshadow-form"),
    ):
        self.driver = driver
        self.host_tag = host_tag
        self.max_depth = max_depth
        self.closed_root_heuristic = closed_root_heuristic
        self.known_hosts = tuple(known_hosts)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_in_shadow(
        self,
        host: HostRef,
        target: str,
        max_depth: Optional[int] = None,
    ) -> Optional[WebElement]:
        """Return the first element matching target under host's shadow tree, or None."""
        return self.locate_in_shadow(host, target, max_depth).element

    def locate_in_shadow(
        self,
        host: HostRef,
        target: str,
        max_depth: Optional[int] = None,
    ) -> ShadowLookup:
        """
        Depth-first search for target through open shadow roots.

        Args:
            host: CSS selector for light-DOM hosts, a host element, or None
                to start from every open shadow host and every element of a
                known host tag in the light DOM.
            target: CSS selector evaluated inside each shadow root.
            max_depth: Deepest shadow root to enter; the host's own root
                is depth 1.

        Returns:
            ShadowLookup; ``element`` is None when nothing matched.
        """
        max_depth = self.max_depth if max_depth is None else max_depth
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")

        visited = set()
        closed: List[WebElement] = []
        try:
            stack: List[Tuple[WebElement, int]] = [
                (h, 1) for h in reversed(self._initial_hosts(host))
            ]
            while stack:
                node, depth = stack.pop()
                if node.id in visited:
                    continue
                visited.add(node.id)

                root = self._open_root(node)
                if root is None:
                    closed.append(node)
                    continue

                matches = root.find_elements(By.CSS_SELECTOR, target)
                if matches:
                    logger.debug(f"[ShadowPiercer] Found '{target}' at shadow depth {depth}")
                    return ShadowLookup(matches[0], depth, OPEN_ROOT, len(visited), len(closed))

                if depth >= max_depth:
                    continue
                for child in reversed(self._nested_hosts(node)):
                    if child.id not in visited:
                        stack.append((child, depth + 1))
        except WebDriverException as e:
            logger.warning(f"[ShadowPiercer] Shadow walk for '{target}' failed: {e}")
            return ShadowLookup(None, visited_hosts=len(visited), closed_hosts=len(closed), error=str(e))

        element = self._attribute_scan(target, closed)
        if element is not None:
            logger.info(f"[ShadowPiercer] '{target}' reached via attribute scan (best effort)")
            return ShadowLookup(element, None, ATTRIBUTE_SCAN, len(visited), len(closed))

        return ShadowLookup(None, visited_hosts=len(visited), closed_hosts=len(closed))

    def find_at_path(self, path: ShadowPath) -> Optional[WebElement]:
        """Follow an exact ShadowPath; None if any step is missing or closed."""
        try:
            result = self.driver.execute_script(
                scripts.FIND_AT_PATH_SCRIPT, list(path.hosts), path.target
            )
        except WebDriverException as e:
            logger.warning(f"[ShadowPiercer] Path '{path}' failed: {e}")
            return None
        return result if isinstance(result, WebElement) else None

    def read_value_in_shadow(self, target: str, host: HostRef = None) -> Optional[str]:
        """Current value of the first shadow element matching target, or None."""
        element = self.find_in_shadow(host, target)
        if element is None:
            return None
        try:
            return element.get_property("value")
        except WebDriverException as e:
            logger.debug(f"[ShadowPiercer] Could not read '{target}': {e}")
            return None

    def census(self) -> ShadowCensus:
        """Describe the page's shadow structure."""
        try:
            data = self.driver.execute_script(scripts.CENSUS_SCRIPT, ", ".join(self.known_hosts))
        except WebDriverException as e:
            return ShadowCensus(error=str(e))
        data = data or {}
        return ShadowCensus(
            total_elements=int(data.get("total", 0)),
            custom_hosts=int(data.get("custom_hosts", 0)),
            inputs=int(data.get("inputs", 0)),
            open_hosts=list(data.get("open_hosts", [])),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_value_in_shadow(
        self, target: str, value: str, host_tag: Optional[str] = None
    ) -> PierceOutcome:
        """Set a text input's value."""
        return self._mutate("set_value_in_shadow", target, SET_VALUE, value, host_tag)

    def set_checked_in_shadow(self, target: str, host_tag: Optional[str] = None) -> PierceOutcome:
        """Check a radio button or checkbox."""
        return self._mutate("set_checked_in_shadow", target, SET_CHECKED, True, host_tag)

    def select_option_in_shadow(
        self, target: str, option_text: str, host_tag: Optional[str] = None
    ) -> PierceOutcome:
        """Select the option whose visible text equals option_text."""
        return self._mutate("select_option_in_shadow", target, SELECT_OPTION, option_text, host_tag)

    def set_value_at_path(self, path: ShadowPath, value: str) -> PierceOutcome:
        """Set a text input reached through nested shadow roots."""
        first = (
            "path_descent",
            scripts.PATH_DESCENT_SCRIPT,
            (list(path.hosts), path.target, SET_VALUE, value),
        )
        depth = max(self.max_depth, path.depth)
        return self._run("set_value_at_path", path.target, SET_VALUE, value, first, depth)

    def _mutate(
        self,
        operation: str,
        target: str,
        kind: str,
        value: Any,
        host_tag: Optional[str],
    ) -> PierceOutcome:
        host_tag = host_tag or self.host_tag
        first = ("host_query", scripts.HOST_QUERY_SCRIPT, (host_tag, target, kind, value))
        return self._run(operation, target, kind, value, first, self.max_depth)

    def _run(
        self,
        operation: str,
        target: str,
        kind: str,
        value: Any,
        first: Tuple[str, str, Tuple[Any, ...]],
        max_depth: int,
    ) -> PierceOutcome:
        plan = [
            first,
            ("shadow_scan", scripts.SHADOW_SCAN_SCRIPT, (target, kind, value, max_depth)),
            ("light_dom", scripts.LIGHT_DOM_SCRIPT, (target, kind, value)),
        ]
        outcome = PierceOutcome(operation=operation, target=target)

        for name, script, args in plan:
            result = self._attempt(name, script, args)
            outcome.strategies.append(result)
            if result.succeeded:
                logger.info(f"[ShadowPiercer] {operation} '{target}' succeeded via {name}")
                return outcome
            logger.debug(f"[ShadowPiercer] {operation} '{target}' {name} failed: {result.error}")

        logger.warning(f"[ShadowPiercer] {operation} '{target}' failed with every strategy")
        return outcome

    def _attempt(self, name: str, script: str, args: Tuple[Any, ...]) -> StrategyOutcome:
        try:
            result = self.driver.execute_script(script, *args)
        except Exception as e:
            return StrategyOutcome(name, False, error=str(e))

        if not isinstance(result, dict):
            return StrategyOutcome(name, False, error=f"unexpected script result: {result!r}")
        applied = bool(result.get("applied"))
        matched = int(result.get("seen") or 0)
        error = None
        if not applied:
            error = "matched but not mutable" if matched else "no match"
        return StrategyOutcome(name, applied, matched, result.get("depth"), error)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _initial_hosts(self, host: HostRef) -> List[WebElement]:
        if host is None:
            return list(
                self.driver.execute_script(scripts.LIGHT_DOM_SHADOW_HOSTS, ", ".join(self.known_hosts))
                or []
            )
        if isinstance(host, str):
            return list(self.driver.find_elements(By.CSS_SELECTOR, host))
        return [host]

    def _nested_hosts(self, host: WebElement) -> List[WebElement]:
        return list(self.driver.execute_script(scripts.NESTED_SHADOW_HOSTS, host) or [])

    @staticmethod
    def _open_root(host: WebElement) -> Optional["ShadowRoot"]:
        try:
            return host.shadow_root
        except NoSuchShadowRootException:
            return None

    def _attribute_scan(self, target: str, closed_hosts: List[WebElement]) -> Optional[WebElement]:
        if not self.closed_root_heuristic or not closed_hosts:
            return None
        match = ID_SELECTOR.match(target)
        if match is None:
            return None
        try:
            result = self.driver.execute_script(
                scripts.ATTRIBUTE_SCAN_SCRIPT, match.group(1), closed_hosts
            )
        except WebDriverException as e:
            logger.debug(f"[ShadowPiercer] Attribute scan for '{target}' failed: {e}")
            return None
        return result if isinstance(result, WebElement) else None
