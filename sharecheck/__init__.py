"""
sharecheck: SMB file-content check for competition scoring engines.

The host calls `run(ctx, target, command, expected_output, username, password, options)`
and gets back `(success, message)`.
"""

__version__ = "1.0.0"

from .context import CheckContext
from .engine import run, execute
from .models import CheckOptions, CheckResult
from .options import resolve_options

__all__ = ["run", "execute", "CheckContext", "CheckOptions", "CheckResult", "resolve_options"]
