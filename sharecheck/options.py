import logging
from typing import Any, Dict, Mapping, Optional

from .models import CheckOptions

logger = logging.getLogger("share_check.options")

# Config key -> (CheckOptions field, expected type)
# A flag is enabled only when its value is the boolean True.
OPTION_KEYS: Dict[str, tuple] = {
    "domain": ("domain", str),
    "share": ("share", str),
    "exists": ("exists", bool),
    "regex_match": ("regex_match", bool),
    "substring_match": ("substring_match", bool),
    "match": ("exact_match", bool),
    "sha256": ("sha256", bool),
    "md5": ("md5", bool),
    "sha1": ("sha1", bool),
}

def resolve_options(options: Optional[Mapping[str, Any]]) -> CheckOptions:
    """
    Builds CheckOptions from the host's untyped options map.

    Never raises: absent keys keep their zero value, unknown keys are ignored
    and values of the wrong type are dropped and reported in `invalid_keys`.
    """
    if options is None:
        return CheckOptions()
    if not isinstance(options, Mapping):
        logger.warning("Options must be a mapping, got %s; using defaults", type(options).__name__)
        return CheckOptions()

    values: Dict[str, Any] = {}
    invalid = []

    for key, raw in options.items():
        spec = OPTION_KEYS.get(key)
        if spec is None:
            logger.debug("Ignoring unrecognized option %r", key)
            continue

        field_name, expected_type = spec
        # bool is an int subclass but never a str, so isinstance is exact here
        if isinstance(raw, expected_type):
            values[field_name] = raw
        else:
            invalid.append(key)
            logger.warning(
                "Option %r expects %s, got %s; leaving it at its default",
                key, expected_type.__name__, type(raw).__name__
            )

    return CheckOptions(invalid_keys=tuple(sorted(invalid)), **values)
