"""Settings for the warehouse UI suite.

Settings are read from a YAML file (``config/settings.yaml`` by default, or
the file named by ``WMS_SETTINGS_FILE``). Individual values can be
overridden through environment variables:

- ``WMS_BROWSER``: chrome, edge or firefox
- ``WMS_URL``: base URL of the warehouse web application
- ``WMS_API_BASE_URL``: base URL of the inventory REST API
- ``WMS_HEADLESS``: run the browser headless ("1"/"true")
- ``WMS_OUTPUT_DIR``: directory for reports and screenshots
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from warehouse_bdd.exceptions import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_SETTINGS_FILE = PROJECT_ROOT / "config" / "settings.yaml"
DEFAULT_EXPLICIT_WAIT = 30


@dataclass
class WarehouseSettings:
    """Resolved settings for one test run."""

    url: str
    browser: str = "chrome"
    base_url: Optional[str] = None
    headless: bool = False
    explicit_wait: int = DEFAULT_EXPLICIT_WAIT
    output_dir: Path = PROJECT_ROOT / "Test-Results"
    credentials_file: Optional[Path] = None

    def require_api_base_url(self) -> str:
        """Return the inventory API base URL or fail the setup."""
        if not self.base_url:
            raise ConfigurationError(
                "Inventory API base_url is not configured "
                "(set base_url in the settings file or WMS_API_BASE_URL)"
            )
        return self.base_url.rstrip("/")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _resolve_path(value: Optional[str], base: Path) -> Optional[Path]:
    if not value:
        return None
    path = Path(value)
    return path if path.is_absolute() else base / path


def load_settings(path: Optional[Path] = None) -> WarehouseSettings:
    """Load settings from YAML and apply environment overrides.

    :param path: settings file, defaults to WMS_SETTINGS_FILE or
        config/settings.yaml
    :raises ConfigurationError: if the file is missing, malformed or has
        no application url
    """
    settings_file = Path(path or os.getenv("WMS_SETTINGS_FILE") or DEFAULT_SETTINGS_FILE)
    if not settings_file.exists():
        raise ConfigurationError(f"Settings file not found: {settings_file}")

    with open(settings_file, encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Settings file must hold a mapping: {settings_file}")

    base_dir = settings_file.parent.parent
    url = os.getenv("WMS_URL") or raw.get("url")
    if not url:
        raise ConfigurationError(f"No application 'url' configured in {settings_file}")

    try:
        explicit_wait = int(raw.get("explicit_wait", DEFAULT_EXPLICIT_WAIT))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid explicit_wait in {settings_file}: {e}") from e

    output_dir = _resolve_path(
        os.getenv("WMS_OUTPUT_DIR") or raw.get("output_dir") or "Test-Results", base_dir
    )
    return WarehouseSettings(
        url=url.rstrip("/"),
        browser=(os.getenv("WMS_BROWSER") or raw.get("browser") or "chrome").lower(),
        base_url=os.getenv("WMS_API_BASE_URL") or raw.get("base_url"),
        headless=_as_bool(os.getenv("WMS_HEADLESS", raw.get("headless", False))),
        explicit_wait=explicit_wait,
        output_dir=output_dir,
        credentials_file=_resolve_path(raw.get("credentials_file"), base_dir),
    )
