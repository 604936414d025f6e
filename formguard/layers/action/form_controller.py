"""
Form Field Controller - Semantic form operations.

Maps fields such as "first name" or "gender=Male" to locator strategies
(regular DOM) or shadow selectors (shadow DOM) at call time. Nothing is
cached between calls: the form's frame is located and element handles
are resolved fresh for every operation.

Locating the frame is quick when the form is already present in the main
document or in one of its frames. Only when it is in neither does each
operation wait up to ``form_wait`` seconds for it to appear.
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Union, TYPE_CHECKING
import logging

from selenium.common.exceptions import (
    NoSuchElementException,
    TimeoutException,
    UnexpectedTagNameException,
    WebDriverException,
)
from selenium.webdriver.support.ui import Select, WebDriverWait

from formguard.core.config import FormGuardConfig
from formguard.core.exceptions import ElementNotResolvable, FrameSwitchFailed
from formguard.core.frames import FrameNavigator
from formguard.layers.action import fields
from formguard.layers.resolve.fallback import FallbackResolver
from formguard.layers.shadow.path import ShadowPath
from formguard.layers.shadow.piercer import (
    PierceOutcome,
    ShadowCensus,
    ShadowPiercer,
    StrategyOutcome,
)

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement
    from formguard.reporters.diagnostics import DiagnosticsRecorder

logger = logging.getLogger(__name__)


class FormFieldController:
    """
    Fill and verify a practice form, wherever the form lives.

    Write operations return the controller so calls can be chained; read
    operations return "" / False rather than raising when the field
    cannot be found.

    Example:
        >>> form = FormFieldController(driver).navigate_to(url)
        >>> form.enter_first_name("Jane").select_gender("Female").select_state("India")
        >>> form.get_selected_state()
        'India'
        >>> form.enter_first_name_in_shadow("Jane").winner
        'host_query'
    """

    def __init__(
        self,
        driver: "WebDriver",
        config: Optional[FormGuardConfig] = None,
        recorder: Optional["DiagnosticsRecorder"] = None,
    ):
        self.driver = driver
        self.config = (config or FormGuardConfig()).validate()
        self.recorder = recorder
        self.resolver = FallbackResolver(
            driver,
            timeout=self.config.timeout,
            poll_interval=self.config.poll_interval,
        )
        self.piercer = ShadowPiercer(
            driver,
            host_tag=self.config.shadow_host_tag,
            max_depth=self.config.max_shadow_depth,
            closed_root_heuristic=self.config.closed_root_heuristic,
        )
        self.frames = FrameNavigator(
            driver,
            form_locator=self.config.form_locator,
            form_wait=self.config.form_wait,
            poll_interval=self.config.poll_interval,
        )

    def navigate_to(self, url: str) -> "FormFieldController":
        """Load url and wait for the document to finish loading."""
        self.driver.get(url)
        try:
            WebDriverWait(
                self.driver,
                self.config.page_load_timeout,
                poll_frequency=self.config.poll_interval,
            ).until(lambda d: d.execute_script("return document.readyState") == "complete")
        except TimeoutException:
            logger.warning(f"[FormFieldController] {url} did not finish loading; continuing")

        frame = self.frames.locate_form()
        where = "main document" if frame is None else f"frame {frame}"
        logger.info(f"[FormFieldController] Loaded {url}, form in {where}")
        if self.recorder:
            self.recorder.log_event("navigation", f"Navigated to {url}", url=url, frame=frame)
        return self

    # ------------------------------------------------------------------
    # Regular DOM
    # ------------------------------------------------------------------

    def enter_first_name(self, first_name: str) -> "FormFieldController":
        with self.form_scope():
            self._type(self.resolver.resolve(fields.first_name_strategies()), first_name)
        return self

    def get_first_name_value(self) -> str:
        with self.form_scope():
            return self._read_value(fields.first_name_strategies())

    def enter_last_name(self, last_name: str) -> "FormFieldController":
        with self.form_scope():
            self._type(self.resolver.resolve(fields.last_name_strategies()), last_name)
        return self

    def get_last_name_value(self) -> str:
        with self.form_scope():
            return self._read_value(fields.last_name_strategies())

    def select_gender(self, gender: str) -> "FormFieldController":
        """Select a gender radio; a radio that is already selected is left alone."""
        with self.form_scope():
            self._check(self.resolver.resolve(fields.gender_strategies(gender)))
        return self

    def is_gender_selected(self, gender: str) -> bool:
        with self.form_scope():
            return self._read_selected(fields.gender_strategies(gender))

    def select_hobby(self, hobby: str) -> "FormFieldController":
        """Tick a hobby checkbox; an already ticked box is left alone."""
        with self.form_scope():
            self._check(self.resolver.resolve(fields.hobby_strategies(hobby)))
        return self

    def is_hobby_selected(self, hobby: str) -> bool:
        with self.form_scope():
            return self._read_selected(fields.hobby_strategies(hobby))

    def select_state(self, state: str) -> "FormFieldController":
        with self.form_scope():
            dropdown = Select(self.resolver.resolve(fields.state_strategies()))
            try:
                dropdown.select_by_visible_text(state)
            except NoSuchElementException as e:
                raise ElementNotResolvable([], f"State option '{state}' is not available") from e
        return self

    def get_selected_state(self) -> str:
        with self.form_scope():
            element = self.resolver.try_resolve(fields.state_strategies())
            if element is None:
                return ""
            try:
                return Select(element).first_selected_option.text
            except (NoSuchElementException, UnexpectedTagNameException, WebDriverException) as e:
                logger.debug(f"[FormFieldController] No selected state: {e}")
                return ""

    # ------------------------------------------------------------------
    # Shadow DOM
    # ------------------------------------------------------------------

    def enter_first_name_in_shadow(self, first_name: str) -> PierceOutcome:
        return self._shadow(
            "set_value_in_shadow", "#fname",
            lambda: self.piercer.set_value_in_shadow("#fname", first_name),
        )

    def get_first_name_in_shadow(self) -> str:
        try:
            with self.form_scope():
                return self.piercer.read_value_in_shadow("#fname") or ""
        except (FrameSwitchFailed, WebDriverException) as e:
            logger.warning(f"[FormFieldController] {e}")
            return ""

    def select_gender_in_shadow(self, gender: str) -> PierceOutcome:
        selector = fields.gender_shadow_selector(gender)
        return self._shadow(
            "set_checked_in_shadow", selector,
            lambda: self.piercer.set_checked_in_shadow(selector),
        )

    def select_state_in_shadow(self, state: str) -> PierceOutcome:
        return self._shadow(
            "select_option_in_shadow", "#state",
            lambda: self.piercer.select_option_in_shadow("#state", state),
        )

    def set_value_at_path(self, path: Union[ShadowPath, str], value: str) -> PierceOutcome:
        """Set a text input behind nested shadow roots, e.g. 'outer >> inner >> #fname'."""
        if isinstance(path, str):
            path = ShadowPath.parse(path)
        return self._shadow(
            "set_value_at_path", path.target,
            lambda: self.piercer.set_value_at_path(path, value),
        )

    def describe_shadow_structure(self) -> ShadowCensus:
        census = self.piercer.census()
        if self.recorder:
            self.recorder.log_event(
                "census",
                f"{census.total_elements} elements, {len(census.open_hosts)} open shadow hosts",
                open_hosts=census.open_hosts,
                custom_hosts=census.custom_hosts,
                inputs=census.inputs,
            )
        return census

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def take_screenshot(self, label: str) -> Optional[str]:
        """Save a screenshot; returns its path, or None if capture failed."""
        if self.recorder is None:
            from formguard.reporters.diagnostics import DiagnosticsRecorder
            self.recorder = DiagnosticsRecorder(output_dir=self.config.screenshot_dir)
        return self.recorder.take_screenshot(label, self.driver)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def form_scope(self) -> Iterator[Optional[int]]:
        """Locate the form's frame and run the block inside it."""
        with self.frames.entered(self.frames.locate_form()) as frame:
            yield frame

    def _shadow(self, operation: str, target: str, run) -> PierceOutcome:
        try:
            with self.form_scope():
                outcome = run()
        except (FrameSwitchFailed, WebDriverException) as e:
            logger.warning(f"[FormFieldController] {operation} aborted: {e}")
            outcome = PierceOutcome(operation, target, [StrategyOutcome("frame_scope", False, error=str(e))])
        if self.recorder:
            self.recorder.record_outcome(outcome)
        return outcome

    @staticmethod
    def _type(element: "WebElement", text: str) -> None:
        element.clear()
        element.send_keys(text)

    @staticmethod
    def _check(element: "WebElement") -> None:
        if not element.is_selected():
            element.click()

    def _read_value(self, strategies) -> str:
        element = self.resolver.try_resolve(strategies)
        if element is None:
            return ""
        try:
            return element.get_attribute("value") or ""
        except WebDriverException as e:
            logger.debug(f"[FormFieldController] Could not read value: {e}")
            return ""

    def _read_selected(self, strategies) -> bool:
        element = self.resolver.try_resolve(strategies)
        if element is None:
            return False
        try:
            return element.is_selected()
        except WebDriverException as e:
            logger.debug(f"[FormFieldController] Could not read selection: {e}")
            return False
