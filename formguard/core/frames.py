"""
Frame Navigator - Locating the form across frames.

The current frame is global state on a WebDriver session. The navigator
never leaves the session inside a frame: locate_form() always returns
with the default content selected, and entered() switches in for the
duration of a block and restores the default content on every exit path.
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Tuple, TYPE_CHECKING
import logging

from selenium.common.exceptions import (
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait

from formguard.core.exceptions import FrameSwitchFailed

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)

MAIN_DOCUMENT = None


class FrameNavigator:
    """
    Find which top-level frame hosts the form and scope work inside it.

    Example:
        >>> frames = FrameNavigator(driver, ("id", "automationtestform"))
        >>> index = frames.locate_form()   # None means the main document
        >>> with frames.entered(index):
        ...     driver.find_element("id", "fname").send_keys("Jane")
    """

    def __init__(
        self,
        driver: "WebDriver",
        form_locator: Optional[Tuple[str, str]],
        form_wait: float = 3.0,
        poll_interval: float = 0.5,
    ):
        self.driver = driver
        self.form_locator = form_locator
        self.form_wait = form_wait
        self.poll_interval = poll_interval

    def locate_form(self) -> Optional[int]:
        """
        Return the index of the frame holding the form, or None for the main document.

        The main document and every frame are checked once without waiting.
        Only when the form is in neither does the main document get up to
        ``form_wait`` seconds, followed by one more pass over the frames.
        When the form is nowhere, the main document is used.
        """
        if self.form_locator is None:
            return MAIN_DOCUMENT

        self.restore()
        if self._form_visible_now():
            logger.debug("[FrameNavigator] Form found in main document")
            return MAIN_DOCUMENT

        index = self._probe_frames()
        if index is not None:
            return index

        if self.form_wait > 0:
            if self._form_visible_within(self.form_wait):
                logger.debug("[FrameNavigator] Form appeared in main document")
                return MAIN_DOCUMENT
            index = self._probe_frames()
            if index is not None:
                return index

        logger.info("[FrameNavigator] Form not found in any frame, using main document")
        return MAIN_DOCUMENT

    def _probe_frames(self) -> Optional[int]:
        frame_count = len(self.driver.find_elements(By.TAG_NAME, "iframe"))
        logger.debug(f"[FrameNavigator] Probing {frame_count} frames for the form")

        for index in range(frame_count):
            try:
                self.driver.switch_to.frame(index)
            except WebDriverException as e:
                logger.warning(f"[FrameNavigator] Error switching to frame {index}: {e}")
                self.restore()
                continue

            try:
                found = self._form_visible_now()
            finally:
                self.restore()

            if found:
                logger.info(f"[FrameNavigator] Form found in frame {index}")
                return index
        return None

    @contextmanager
    def entered(self, frame_index: Optional[int]) -> Iterator[Optional[int]]:
        """Switch into frame_index for the block; always restore the default content."""
        if frame_index is MAIN_DOCUMENT:
            yield MAIN_DOCUMENT
            return

        try:
            self.driver.switch_to.frame(frame_index)
        except WebDriverException as e:
            self.restore()
            raise FrameSwitchFailed(frame_index, f"could not enter frame: {e}") from e

        try:
            yield frame_index
        finally:
            self.restore()

    def restore(self) -> None:
        """Return to the default content or raise FrameSwitchFailed."""
        try:
            self.driver.switch_to.default_content()
        except WebDriverException as e:
            raise FrameSwitchFailed("default_content", str(e)) from e

    def _form_visible_now(self) -> bool:
        try:
            return any(el.is_displayed() for el in self.driver.find_elements(*self.form_locator))
        except StaleElementReferenceException:
            return False

    def _form_visible_within(self, seconds: float) -> bool:
        try:
            WebDriverWait(
                self.driver,
                seconds,
                poll_frequency=self.poll_interval,
                ignored_exceptions=(StaleElementReferenceException,),
            ).until(lambda d: self._form_visible_now())
            return True
        except TimeoutException:
            return False
