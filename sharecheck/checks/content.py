import re
import hashlib
import logging

from ..exceptions import ContentMismatch
from ..models import CheckOptions

logger = logging.getLogger("share_check.checks.content")

EMPTY_FILE = "file is empty or does not exist"

def check_content(body: bytes, expected: str, options: CheckOptions):
    """
    Validates file bytes against every enabled strategy, in a fixed order.
    Raises ContentMismatch at the first strategy that fails.
    """
    text = body.decode("utf-8", errors="replace")
    expected_bytes = expected.encode("utf-8")

    if options.exists:
        if not body:
            raise ContentMismatch("exists", EMPTY_FILE)

    if options.regex_match:
        try:
            pattern = re.compile(expected)
        except re.error as e:
            raise ContentMismatch("regex_match", f'invalid regex "{expected}": {e}')

        if not pattern.search(text):
            raise ContentMismatch("regex_match", f'regex mismatch: expected "{expected}", got "{text}"')

    if options.substring_match:
        if expected_bytes not in body:
            raise ContentMismatch("substring_match", f'substring mismatch: expected "{expected}", got "{text}"')

    if options.exact_match:
        if body != expected_bytes:
            raise ContentMismatch("exact_match", f'mismatch: expected "{expected}", got "{text}"')

    for algo in options.hash_flags:
        digest = hashlib.new(algo, body).hexdigest()
        if digest != expected:
            raise ContentMismatch(algo, f'{algo} mismatch: expected "{expected}", got "{digest}"')

    logger.debug("Content checks passed (%d bytes)", len(body))
