"""
Runtime settings for sharecheck, read from the environment.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger("share_check.config")

DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "WARNING"

@dataclass
class Settings:
    # Deadline the CLI applies to each check, in seconds
    timeout: Optional[float] = None
    log_level: Optional[str] = None
    # Require SMB message signing on the connection
    require_signing: Optional[bool] = None

    def __post_init__(self):
        """Fill anything not given explicitly from environment variables."""
        if self.timeout is None:
            raw = os.getenv("SHARECHECK_TIMEOUT")
            self.timeout = DEFAULT_TIMEOUT
            if raw:
                try:
                    self.timeout = float(raw)
                except ValueError:
                    logger.warning("Ignoring SHARECHECK_TIMEOUT=%r (not a number)", raw)

        if self.log_level is None:
            self.log_level = os.getenv("SHARECHECK_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

        if self.require_signing is None:
            self.require_signing = os.getenv("SHARECHECK_REQUIRE_SIGNING", "").lower() in ("true", "1")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls()
