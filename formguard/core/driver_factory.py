"""
Driver Factory - Chrome WebDriver creation for form tests.

The resolver layers only consume a WebDriver; this module is the
replaceable adapter that produces one with options that keep form
pages rendering the same way in headed and headless runs.
"""

from typing import Iterator, Optional, Tuple
from contextlib import contextmanager
import logging

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions

logger = logging.getLogger(__name__)

WebDriverType = webdriver.Chrome

DEFAULT_WINDOW_SIZE = (1920, 1080)


def build_chrome_options(
    headless: bool = False,
    window_size: Optional[Tuple[int, int]] = DEFAULT_WINDOW_SIZE,
    profile_path: Optional[str] = None,
) -> ChromeOptions:
    """Build Chrome options for form testing."""
    options = ChromeOptions()

    if headless:
        options.add_argument("--headless=new")

    if profile_path:
        options.add_argument(f"--user-data-dir={profile_path}")

    if window_size:
        width, height = window_size
        options.add_argument(f"--window-size={width},{height}")
    else:
        options.add_argument("--start-maximized")

    # Practice forms are frequently served inside cross-origin frames
    options.add_argument("--disable-web-security")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--disable-extensions")
    options.add_experimental_option("excludeSwitches", ["enable-automation"])

    return options


def create_driver(
    headless: bool = False,
    window_size: Optional[Tuple[int, int]] = DEFAULT_WINDOW_SIZE,
    profile_path: Optional[str] = None,
    page_load_timeout: float = 30.0,
) -> WebDriverType:
    """
    Create a Chrome WebDriver instance.

    Args:
        headless: Run browser in headless mode
        window_size: (width, height); None maximizes the window instead
        profile_path: Path to browser profile for session persistence
        page_load_timeout: Seconds before driver.get() gives up

    Example:
        >>> driver = create_driver(headless=True)
        >>> driver.get("https://example.com")
    """
    options = build_chrome_options(headless, window_size, profile_path)
    driver = webdriver.Chrome(options=options)
    driver.set_page_load_timeout(page_load_timeout)

    try:
        agent = driver.execute_script("return navigator.userAgent")
        logger.info(f"[DriverFactory] Chrome started: {agent}")
    except Exception as e:
        logger.debug(f"[DriverFactory] Could not read user agent: {e}")

    return driver


@contextmanager
def driver_session(
    headless: bool = False,
    window_size: Optional[Tuple[int, int]] = DEFAULT_WINDOW_SIZE,
    page_load_timeout: float = 30.0,
) -> Iterator[WebDriverType]:
    """
    Create a driver that is quit when the block exits.

    Example:
        >>> with driver_session(headless=True) as driver:
        ...     driver.get("https://example.com")
    """
    driver = create_driver(
        headless=headless,
        window_size=window_size,
        page_load_timeout=page_load_timeout,
    )
    try:
        yield driver
    finally:
        driver.quit()
