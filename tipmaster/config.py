import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from tipmaster.poller import LIVE_MATCH_INTERVAL


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass
class Settings:
    """Dashboard settings loaded from environment variables with safe defaults."""

    app_name: str = "TipMaster Pro"
    log_level: str = "INFO"
    live_poll_interval: float = LIVE_MATCH_INTERVAL
    fetch_timeout: Optional[float] = None
    data_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from TIPMASTER_* environment variables."""
        interval = _optional_float(os.getenv("TIPMASTER_LIVE_POLL_INTERVAL"))
        return cls(
            app_name=os.getenv("TIPMASTER_APP_NAME", cls.app_name),
            log_level=os.getenv("TIPMASTER_LOG_LEVEL", cls.log_level),
            live_poll_interval=interval if interval is not None else cls.live_poll_interval,
            fetch_timeout=_optional_float(os.getenv("TIPMASTER_FETCH_TIMEOUT")),
            data_dir=os.getenv("TIPMASTER_DATA_DIR") or None,
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings.from_env()
