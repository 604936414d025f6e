"""
Locator strategies - single, named ways to find a candidate element.

A strategy is any object with a ``name`` and an ``attempt(driver)``
method returning zero or one element. Strategies are stateless values,
so one list can be shared by every call for the same field.
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Tuple, TYPE_CHECKING

from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver


class LocatorStrategy(Protocol):
    """Anything that can produce a candidate element."""

    name: str

    def attempt(self, driver: "WebDriver") -> Optional[WebElement]:
        ...


@dataclass(frozen=True)
class Locate:
    """Find the first element matching a Selenium (by, value) pair."""
    by: str
    value: str
    label: Optional[str] = None

    @property
    def name(self) -> str:
        return self.label or f"{self.by}={self.value}"

    def attempt(self, driver: "WebDriver") -> Optional[WebElement]:
        found = driver.find_elements(self.by, self.value)
        return found[0] if found else None


@dataclass(frozen=True)
class ScriptLocate:
    """Find an element by evaluating a script that returns it (or null)."""
    label: str
    script: str
    args: Tuple[Any, ...] = ()

    @property
    def name(self) -> str:
        return self.label

    def attempt(self, driver: "WebDriver") -> Optional[WebElement]:
        result = driver.execute_script(self.script, *self.args)
        if isinstance(result, list):
            result = result[0] if result else None
        return result if isinstance(result, WebElement) else None


def by_id(value: str) -> Locate:
    return Locate(By.ID, value, f"id={value}")


def by_name(value: str) -> Locate:
    return Locate(By.NAME, value, f'name="{value}"')


def by_xpath(value: str, label: Optional[str] = None) -> Locate:
    return Locate(By.XPATH, value, label)


def by_css(value: str, label: Optional[str] = None) -> Locate:
    return Locate(By.CSS_SELECTOR, value, label)


def xpath_literal(text: str) -> str:
    """Quote text for use inside an XPath expression."""
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"
