"""Runtime configuration read from the environment.

A ``.env`` file in the working directory is loaded first; real
environment variables win over it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from invbrowser.domain.exceptions import ConfigError

_PREFIX = "INVBROWSER_"


def _int_setting(env: dict[str, str], name: str, default: int) -> int:
    raw = env.get(_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{_PREFIX}{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{_PREFIX}{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    api_url: str = ""
    api_key: str = ""
    data_file: Path = Path("data") / "products.json"
    items_per_page: int = 9
    page_window: int = 5
    low_stock_threshold: int = 10
    timeout: int = 15
    log_level: str = "WARNING"

    @property
    def uses_remote_store(self) -> bool:
        return bool(self.api_url)

    @staticmethod
    def from_env(env: dict[str, str] | None = None) -> Settings:
        """Build settings from *env* (defaults to ``os.environ`` after .env)."""
        if env is None:
            load_dotenv(override=False)
            env = dict(os.environ)

        return Settings(
            api_url=env.get(_PREFIX + "API_URL", "").strip().rstrip("/"),
            api_key=env.get(_PREFIX + "API_KEY", "").strip(),
            data_file=Path(
                env.get(_PREFIX + "DATA_FILE", "").strip()
                or Settings.data_file
            ),
            items_per_page=_int_setting(env, "ITEMS_PER_PAGE", Settings.items_per_page),
            page_window=_int_setting(env, "PAGE_WINDOW", Settings.page_window),
            low_stock_threshold=_int_setting(
                env, "LOW_STOCK_THRESHOLD", Settings.low_stock_threshold
            ),
            timeout=_int_setting(env, "TIMEOUT", Settings.timeout),
            log_level=env.get(_PREFIX + "LOG_LEVEL", "").strip().upper()
            or Settings.log_level,
        )
