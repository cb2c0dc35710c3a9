from dataclasses import dataclass, field
from typing import Dict, Any, Tuple

# Flag name -> hashlib algorithm. Each flag hashes with its namesake.
HASH_ALGORITHMS = ("sha256", "md5", "sha1")

DEFAULT_SMB_PORT = 445

@dataclass(frozen=True)
class CheckOptions:
    """Resolved check configuration. Built once per invocation, never mutated."""
    domain: str = ""
    share: str = ""
    exists: bool = False
    regex_match: bool = False
    substring_match: bool = False
    exact_match: bool = False
    sha256: bool = False
    md5: bool = False
    sha1: bool = False
    # Recognized keys that carried a value of the wrong type
    invalid_keys: Tuple[str, ...] = ()

    @property
    def hash_flags(self) -> Tuple[str, ...]:
        return tuple(algo for algo in HASH_ALGORITHMS if getattr(self, algo))

@dataclass
class CheckResult:
    success: bool
    message: str = ""

    def as_tuple(self) -> Tuple[bool, str]:
        return self.success, self.message

@dataclass
class CheckDefinition:
    """One check as written in a checks file."""
    id: str
    target: str
    path: str
    expected: str = ""
    username: str = ""
    password: str = ""
    options: Dict[str, Any] = field(default_factory=dict)
