import yaml
import logging
from typing import List

from .models import CheckDefinition

logger = logging.getLogger("share_check.scenarios")

class ChecksFileError(ValueError):
    pass

def load_checks(path: str) -> List[CheckDefinition]:
    """
    Loads check definitions from a YAML list, e.g.

        - id: web-config
          target: 10.0.0.5
          path: inetpub/web.config
          expected: "<configuration>"
          username: scorer
          password: hunter2
          options: {domain: CORP, share: C$, substring_match: true}
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or []
    except (OSError, yaml.YAMLError) as e:
        raise ChecksFileError(f"Error loading checks file {path}: {e}") from e

    if not isinstance(data, list):
        raise ChecksFileError(f"Checks file {path} must contain a list, got {type(data).__name__}")

    checks: List[CheckDefinition] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise ChecksFileError(f"Entry #{idx} in {path} is not a mapping")
        missing = [k for k in ("target", "path") if not item.get(k)]
        if missing:
            raise ChecksFileError(f"Entry #{idx} in {path} is missing: {', '.join(missing)}")

        options = item.get("options") or {}
        if not isinstance(options, dict):
            logger.warning("Entry #%d options is not a mapping; ignoring it", idx)
            options = {}

        checks.append(CheckDefinition(
            id=str(item.get("id", f"check_{idx}")),
            target=str(item["target"]),
            path=str(item["path"]),
            expected=str(item.get("expected", "")),
            username=str(item.get("username", "")),
            password=str(item.get("password", "")),
            options=options,
        ))

    return checks
