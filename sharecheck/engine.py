import logging
from typing import Any, Mapping, Optional, Tuple

from .checks import check_content
from .config import Settings
from .context import CheckContext
from .exceptions import ShareCheckError
from .models import CheckResult
from .options import resolve_options
from .smb_client import ShareSession, split_target

logger = logging.getLogger("share_check.engine")

def sanitize(message: str) -> str:
    """Strips NUL bytes so binary error text cannot leak into host logs."""
    return message.replace("\x00", "")

def execute(ctx: Optional[CheckContext], target: str, command: str, expected_output: str,
            username: str, password: str, options: Optional[Mapping[str, Any]],
            settings: Optional[Settings] = None) -> CheckResult:
    """
    Runs one check: dial, authenticate, mount, open, read, compare.
    Every failure comes back as an unsuccessful CheckResult; nothing is raised.
    """
    ctx = ctx or CheckContext.background()
    settings = settings or Settings.from_env()

    try:
        opts = resolve_options(options)
        host, port = split_target(target)

        with ShareSession(host, port, ctx=ctx, require_signing=settings.require_signing) as smb:
            smb.dial()
            smb.authenticate(username, password, opts.domain)
            smb.mount(opts.share)
            remote = smb.open(command)
            remote.seek(0)
            body = remote.read_all()
            check_content(body, expected_output, opts)

    except ShareCheckError as e:
        message = sanitize(str(e) or type(e).__name__)
        logger.info("Check against %s failed (%s): %s", target, type(e).__name__, message)
        return CheckResult(False, message)
    except Exception as e:
        # The host must never see an exception from a check
        logger.exception("Unexpected error checking %s", target)
        return CheckResult(False, sanitize(str(e) or type(e).__name__))

    logger.debug("Check against %s passed", target)
    return CheckResult(True, "")

def run(ctx: Optional[CheckContext], target: str, command: str, expected_output: str,
        username: str, password: str, options: Optional[Mapping[str, Any]]) -> Tuple[bool, str]:
    """Scoring-host entry point. Returns (success, message)."""
    return execute(ctx, target, command, expected_output, username, password, options).as_tuple()
