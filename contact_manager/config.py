"""Configuration helpers for the Contact Manager client."""
from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
import yaml

DEFAULT_BACKEND_URL = "http://localhost:3001/"
DEFAULT_TIMEOUT_SECONDS = 15.0
EDIT_MODES = ("draft", "in_place")
SORT_CHOICES = ("", "name", "email", "time")

PROJECT_ROOT = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT.parent / "config" / "contact_manager.yml"


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the client."""

    backend_url: str = DEFAULT_BACKEND_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    edit_mode: str = "draft"
    default_sort: str = ""
    environment: str = "local"


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}

    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unable to parse config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping.")
    return data


def _normalize_url(value: str) -> str:
    url = value.strip()
    if not url.startswith(("http://", "https://")):
        raise ConfigError(f"Backend URL must start with http:// or https://: {value!r}")
    if not url.endswith("/"):
        url = f"{url}/"
    return url


def _parse_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Timeout must be a number of seconds, got {value!r}") from exc
    if timeout <= 0:
        raise ConfigError(f"Timeout must be positive, got {timeout}")
    return timeout


def load_settings(
    *,
    config_path: Optional[Path] = None,
    use_dotenv: bool = True,
    backend_url: Optional[str] = None,
) -> Settings:
    """Load settings from the YAML config file and environment variables.

    Environment variables win over the config file:

    - ``CONTACTS_BACKEND_URL``: base URL of the contact collection.
    - ``CONTACTS_TIMEOUT``: request timeout in seconds.
    - ``CONTACTS_EDIT_MODE``: ``draft`` or ``in_place``.
    - ``CONTACTS_DEFAULT_SORT``: initial sort key (``name``, ``email``, ``time``).
    - ``CONTACTS_ENV``: free-form environment label.

    Args:
        config_path: Explicit YAML file. Defaults to ``CONTACTS_CONFIG`` or
            ``config/contact_manager.yml``.
        use_dotenv: Load a ``.env`` file into the environment first.
        backend_url: Command-line override; wins over the environment and
            config file and is checked the same way.

    Raises:
        ConfigError: if a value is malformed.
    """

    if use_dotenv:
        load_dotenv()

    if config_path is None:
        override = os.getenv("CONTACTS_CONFIG")
        config_path = Path(override) if override else DEFAULT_CONFIG_PATH

    data = _load_yaml(config_path)

    backend_url = (
        backend_url
        or os.getenv("CONTACTS_BACKEND_URL")
        or data.get("backend_url")
        or DEFAULT_BACKEND_URL
    )
    timeout = os.getenv("CONTACTS_TIMEOUT") or data.get("timeout_seconds") or DEFAULT_TIMEOUT_SECONDS
    edit_mode = (os.getenv("CONTACTS_EDIT_MODE") or data.get("edit_mode") or "draft").strip().lower()
    default_sort = os.getenv("CONTACTS_DEFAULT_SORT")
    if default_sort is None:
        default_sort = data.get("default_sort") or ""
    default_sort = default_sort.strip().lower()
    if default_sort == "none":
        default_sort = ""

    if edit_mode not in EDIT_MODES:
        raise ConfigError(
            f"Unknown edit mode {edit_mode!r}. Expected one of: {', '.join(EDIT_MODES)}"
        )
    if default_sort not in SORT_CHOICES:
        raise ConfigError(f"Unknown default sort {default_sort!r}.")

    return Settings(
        backend_url=_normalize_url(str(backend_url)),
        timeout_seconds=_parse_timeout(timeout),
        edit_mode=edit_mode,
        default_sort=default_sort,
        environment=os.getenv("CONTACTS_ENV", str(data.get("environment", "local"))),
    )
