"""Run report and step logger.

:class:`RunReport` collects log entries per test and writes an HTML and a
JSON report when flushed at the end of the run. The current test is bound
per thread so parallel scenarios never interleave their entries.
:class:`StepLogger` is the façade used by pages and step definitions; it
mirrors every entry to Python logging and attaches screenshots on request.
"""

from __future__ import annotations

import html
import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)

DriverSource = Callable[[], Optional[WebDriver]]


class Status(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    INFO = "INFO"
    WARNING = "WARNING"
    SKIP = "SKIP"


_LOG_LEVELS = {
    Status.PASS: logging.INFO,
    Status.FAIL: logging.ERROR,
    Status.INFO: logging.INFO,
    Status.WARNING: logging.WARNING,
    Status.SKIP: logging.INFO,
}


def _timestamp() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S_%f")


@dataclass
class LogEntry:
    status: Status
    message: str
    timestamp: str
    screenshot: Optional[str] = None


@dataclass
class ScenarioRecord:
    name: str
    tags: Tuple[str, ...] = ()
    started: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))
    finished: Optional[str] = None
    outcome: Optional[str] = None
    entries: List[LogEntry] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """The pytest outcome once known, otherwise any FAIL entry."""
        if self.outcome is not None:
            return self.outcome == "failed"
        return any(e.status is Status.FAIL for e in self.entries)


class RunReport:
    """Report for one run, flushed once at the end."""

    def __init__(self, output_dir: Path, title: str = "Warehouse Management Test Report") -> None:
        self.output_dir = Path(output_dir)
        self.screenshots_dir = self.output_dir / "Screenshots"
        self.title = title
        self.tests: List[ScenarioRecord] = []
        self._current = threading.local()
        self._lock = threading.Lock()
        self._flushed = False

    def start_test(self, name: str, tags: Tuple[str, ...] = ()) -> ScenarioRecord:
        record = ScenarioRecord(name=name, tags=tuple(tags))
        with self._lock:
            self.tests.append(record)
        self._current.record = record
        logger.info("Test started: %s", name)
        return record

    def current_test(self) -> Optional[ScenarioRecord]:
        return getattr(self._current, "record", None)

    def end_test(self, outcome: str) -> None:
        record = self.current_test()
        if record is None:
            return
        record.outcome = outcome
        record.finished = datetime.now().isoformat(timespec="seconds")
        self._current.record = None
        logger.info("Test finished: %s (%s)", record.name, outcome)

    def save_screenshot(self, png: bytes, status: Status) -> Path:
        self.screenshots_dir.mkdir(parents=True, exist_ok=True)
        path = self.screenshots_dir / f"{status.value}_{_timestamp()}.png"
        path.write_bytes(png)
        return path

    def log(
        self, status: Status, message: str, screenshot_png: Optional[bytes] = None
    ) -> Optional[LogEntry]:
        """Append an entry to the calling thread's current test.

        Without a current test the message only goes to Python logging.
        """
        logger.log(_LOG_LEVELS[status], "[%s] %s", status.value, message)
        record = self.current_test()
        if record is None:
            return None

        screenshot = None
        if screenshot_png is not None:
            screenshot = str(self.save_screenshot(screenshot_png, status).relative_to(self.output_dir))
        entry = LogEntry(status=status, message=message, timestamp=_timestamp(), screenshot=screenshot)
        with self._lock:
            record.entries.append(entry)
        return entry

    def summary(self) -> dict:
        failed = sum(1 for t in self.tests if t.failed)
        skipped = sum(1 for t in self.tests if t.outcome == "skipped")
        return {
            "total": len(self.tests),
            "passed": len(self.tests) - failed - skipped,
            "failed": failed,
            "skipped": skipped,
        }

    def flush(self) -> Tuple[Path, Path]:
        """Write the HTML and JSON reports and return their paths."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        html_path = self.output_dir / f"WarehouseReport_{stamp}.html"
        json_path = self.output_dir / f"WarehouseReport_{stamp}.json"

        payload = {
            "title": self.title,
            "generated": datetime.now().isoformat(timespec="seconds"),
            "summary": self.summary(),
            "tests": [asdict(t) for t in self.tests],
        }
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, default=str)
        with open(html_path, "w", encoding="utf-8") as f:
            f.write(self._render_html(payload["summary"]))

        if self._flushed:
            logger.warning("Report flushed more than once")
        self._flushed = True
        logger.info("Report written to %s", html_path)
        return html_path, json_path

    def _render_html(self, summary: dict) -> str:
        sections = "".join(self._render_test(t) for t in self.tests)
        return f"""<html><head><title>{html.escape(self.title)}</title>
<style>
body {{ font-family: Arial, sans-serif; padding: 20px; }}
.summary {{ margin-bottom: 16px; }}
.PASS {{ color: #0a7b44; }}
.FAIL {{ color: #b00020; }}
.WARNING {{ color: #b26a00; }}
.INFO, .SKIP {{ color: #555; }}
table {{ border-collapse: collapse; width: 100%; }}
td {{ border-bottom: 1px solid #eee; padding: 4px 8px; vertical-align: top; }}
img {{ max-width: 480px; border: 1px solid #ddd; }}
</style>
</head><body>
  <h1>{html.escape(self.title)}</h1>
  <div class="summary">
    <strong>Total:</strong> {summary['total']} &nbsp;
    <strong class="PASS">Passed:</strong> {summary['passed']} &nbsp;
    <strong class="FAIL">Failed:</strong> {summary['failed']} &nbsp;
    <strong>Skipped:</strong> {summary['skipped']}
  </div>
  <hr />
{sections}</body></html>
"""

    @staticmethod
    def _render_test(record: ScenarioRecord) -> str:
        status_class = "FAIL" if record.failed else "PASS"
        rows = []
        for entry in record.entries:
            img = f'<br /><img src="{html.escape(entry.screenshot)}" />' if entry.screenshot else ""
            rows.append(
                f'    <tr><td class="{entry.status.value}">{entry.status.value}</td>'
                f"<td>{html.escape(entry.timestamp)}</td>"
                f"<td>{html.escape(entry.message)}{img}</td></tr>\n"
            )
        tags = " ".join(f"@{html.escape(t)}" for t in record.tags)
        return f"""  <section>
    <h3 class="{status_class}">{html.escape(record.name)} ({html.escape(record.outcome or 'unknown')})</h3>
    <div>{tags}</div>
    <table>
{''.join(rows)}    </table>
  </section>
  <hr />
"""


class StepLogger:
    """Log step outcomes to the run report, optionally with a screenshot.

    Args:
        report: run report receiving the entries
        driver_source: callable returning the driver to screenshot, or None
    """

    def __init__(self, report: RunReport, driver_source: Optional[DriverSource] = None) -> None:
        self.report = report
        self._driver_source = driver_source or (lambda: None)

    def _capture(self) -> Optional[bytes]:
        driver = self._driver_source()
        if driver is None:
            return None
        try:
            return driver.get_screenshot_as_png()
        except WebDriverException as e:
            logger.warning("Screenshot capture failed: %s", e)
            return None

    def _log(self, status: Status, message: str, screenshot: bool) -> Optional[LogEntry]:
        png = self._capture() if screenshot else None
        return self.report.log(status, message, png)

    def passed(self, message: str, screenshot: bool = False) -> Optional[LogEntry]:
        return self._log(Status.PASS, message, screenshot)

    def failed(self, message: str, screenshot: bool = False) -> Optional[LogEntry]:
        return self._log(Status.FAIL, message, screenshot)

    def info(self, message: str, screenshot: bool = False) -> Optional[LogEntry]:
        return self._log(Status.INFO, message, screenshot)

    def warning(self, message: str, screenshot: bool = False) -> Optional[LogEntry]:
        return self._log(Status.WARNING, message, screenshot)

    def skipped(self, message: str, screenshot: bool = False) -> Optional[LogEntry]:
        return self._log(Status.SKIP, message, screenshot)

    def step_start(self, step_name: str) -> None:
        self.info(f"Starting step: {step_name}")

    def step_complete(self, step_name: str) -> None:
        self.passed(f"Completed step: {step_name}")
