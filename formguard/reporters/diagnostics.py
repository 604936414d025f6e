"""
Diagnostics Recorder - Screenshots and an event record for form runs.

The resolution layers return structured outcomes; the recorder is where
a caller chooses to keep them. Nothing here is allowed to fail a test:
capture and write errors are logged and swallowed so they never mask
the failure being diagnosed.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from datetime import datetime
import json
import logging
import os
import re

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from formguard.layers.shadow.piercer import PierceOutcome

logger = logging.getLogger(__name__)


@dataclass
class DiagnosticEvent:
    """A single entry in the diagnostics record."""
    timestamp: datetime
    event_type: str  # 'navigation', 'shadow', 'census', 'screenshot', 'error', 'info'
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    screenshot_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type,
            "message": self.message,
            "data": self.data,
            "screenshot_path": self.screenshot_path,
        }


class DiagnosticsRecorder:
    """
    Collects diagnostic events and screenshots for one run.

    Example:
        >>> recorder = DiagnosticsRecorder()
        >>> form = FormFieldController(driver, recorder=recorder)
        >>> form.enter_first_name_in_shadow("Jane")
        >>> recorder.take_screenshot("after_shadow", driver)
        >>> recorder.save()
    """

    def __init__(
        self,
        output_dir: str = "./formguard_reports",
        run_name: Optional[str] = None,
    ):
        """
        Args:
            output_dir: Directory for run folders
            run_name: Optional name for this run (defaults to a timestamp)
        """
        self.output_dir = output_dir
        self.run_name = run_name or datetime.now().strftime("%Y%m%d_%H%M%S")
        self.run_dir = os.path.join(output_dir, self.run_name)
        self.screenshots_dir = os.path.join(self.run_dir, "screenshots")
        self.events: List[DiagnosticEvent] = []
        self.metadata: Dict[str, Any] = {
            "start_time": datetime.now().isoformat(),
            "run_name": self.run_name,
        }

    def log_event(self, event_type: str, message: str, **data: Any) -> DiagnosticEvent:
        event = DiagnosticEvent(datetime.now(), event_type, message, data)
        self.events.append(event)
        return event

    def record_outcome(self, outcome: "PierceOutcome") -> DiagnosticEvent:
        """Keep a shadow-DOM outcome."""
        status = f"succeeded via {outcome.winner}" if outcome.succeeded else "failed"
        return self.log_event(
            "shadow",
            f"{outcome.operation} '{outcome.target}' {status}",
            **outcome.to_dict(),
        )

    def log_error(self, message: str, exception: Optional[BaseException] = None) -> DiagnosticEvent:
        return self.log_event("error", message, exception=str(exception) if exception else None)

    def take_screenshot(self, label: str, driver: "WebDriver") -> Optional[str]:
        """
        Capture the page to <run_dir>/screenshots/<label>_<timestamp>.png.

        Returns:
            Path of the saved file, or None if the capture failed.
        """
        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
        path = os.path.join(self.screenshots_dir, f"{_safe_label(label)}_{timestamp}.png")

        try:
            driver.execute_script("window.scrollTo(0, 0);")
        except Exception as e:
            logger.debug(f"[DiagnosticsRecorder] Could not scroll before screenshot: {e}")

        try:
            png = driver.get_screenshot_as_png()
            os.makedirs(self.screenshots_dir, exist_ok=True)
            with open(path, "wb") as f:
                f.write(png)
        except Exception as e:
            logger.warning(f"[DiagnosticsRecorder] Screenshot '{label}' failed: {e}")
            self.log_error(f"Screenshot '{label}' failed", e)
            return None

        event = self.log_event("screenshot", f"Screenshot {label}", label=label)
        event.screenshot_path = path
        logger.info(f"[DiagnosticsRecorder] Screenshot saved to: {path}")
        return path

    def save(self) -> Optional[str]:
        """Write diagnostics.json into the run folder; returns its path or None."""
        self.metadata["end_time"] = datetime.now().isoformat()
        path = os.path.join(self.run_dir, "diagnostics.json")
        try:
            os.makedirs(self.run_dir, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(
                    {"metadata": self.metadata, "events": [e.to_dict() for e in self.events]},
                    f,
                    indent=2,
                    default=str,
                )
        except OSError as e:
            logger.warning(f"[DiagnosticsRecorder] Could not write {path}: {e}")
            return None
        return path


def _safe_label(label: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", label).strip("_") or "screenshot"
