"""sharecheck exceptions.

Every failure inside a check is raised as a ShareCheckError subclass naming the
step that failed. The plugin entry point converts them to a (False, message)
pair, so none of these ever reach the scoring host.
"""


class ShareCheckError(Exception):
    """Base exception for all sharecheck errors."""

    pass


class DialError(ShareCheckError):
    """Raised when the transport to the target cannot be established.

    This can indicate:
    - Connection refused or host unreachable
    - DNS resolution failure
    - Timeout during connect or dialect negotiation
    - A malformed port in the target string
    """

    pass


class AuthenticationError(ShareCheckError):
    """Raised when NTLM session setup is rejected."""

    pass


class MountError(ShareCheckError):
    """Raised when the share cannot be mounted (missing share, access denied)."""

    pass


class OpenError(ShareCheckError):
    """Raised when the target file cannot be opened for reading."""

    pass


class ReadError(ShareCheckError):
    """Raised when seeking or reading the opened file fails."""

    pass


class ValidationError(ShareCheckError):
    """Raised when file content does not satisfy the configured strategies."""

    pass


class ContentMismatch(ValidationError):
    """Raised by a single comparison strategy that did not pass."""

    def __init__(self, strategy: str, message: str):
        super().__init__(message)
        self.strategy = strategy


class CheckCancelled(ShareCheckError):
    """Raised when the caller's context is cancelled or its deadline passes."""

    pass
