"""
Thin step-by-step wrapper over smbprotocol.

Each public method acquires exactly one resource (transport, session, tree,
file handle) and registers its release. `close()` releases whatever was
acquired, newest first, each exactly once.
"""
import io
import uuid
import logging
import threading
from typing import Callable, List, Optional, Tuple

from smbprotocol.connection import Connection
from smbprotocol.session import Session
from smbprotocol.tree import TreeConnect
from smbprotocol.open import (
    CreateDisposition,
    CreateOptions,
    FileAttributes,
    FilePipePrinterAccessMask,
    ImpersonationLevel,
    Open,
    ShareAccess,
)

from .context import CheckContext
from .exceptions import (
    AuthenticationError,
    CheckCancelled,
    DialError,
    MountError,
    OpenError,
    ReadError,
    ShareCheckError,
)
from .models import DEFAULT_SMB_PORT

logger = logging.getLogger("share_check.smb")

DEFAULT_READ_SIZE = 65536
DEFAULT_CONNECT_TIMEOUT = 60.0

def split_target(target: str) -> Tuple[str, int]:
    """
    Splits `host[:port]` into its parts, defaulting the port to 445.
    Accepts bracketed IPv6 (`[fe80::1]:445`); a bare IPv6 literal is taken as a host.
    """
    target = (target or "").strip()
    port_str = None

    if target.startswith("["):
        end = target.find("]")
        if end == -1:
            raise DialError(f"invalid target address \"{target}\": missing ']'")
        host, rest = target[1:end], target[end + 1:]
        if rest:
            if not rest.startswith(":"):
                raise DialError(f"invalid target address \"{target}\"")
            port_str = rest[1:]
    elif target.count(":") == 1:
        host, port_str = target.split(":")
    else:
        host = target

    if not host:
        raise DialError(f"invalid target address \"{target}\": missing host")

    if port_str is None:
        return host, DEFAULT_SMB_PORT

    if not port_str.isdigit() or not 0 < int(port_str) < 65536:
        raise DialError(f"invalid port \"{port_str}\" in target \"{target}\"")
    return host, int(port_str)

def normalize_path(path: str) -> str:
    """smbprotocol wants backslash separators and no leading separator."""
    return (path or "").replace("/", "\\").lstrip("\\")

class RemoteFile:
    """Read cursor over an opened SMB file handle."""

    def __init__(self, handle: Open, max_read_size: int = DEFAULT_READ_SIZE, ctx: Optional[CheckContext] = None):
        self.handle = handle
        self.max_read_size = max_read_size if isinstance(max_read_size, int) and max_read_size > 0 else DEFAULT_READ_SIZE
        self.ctx = ctx or CheckContext.background()
        self.offset = 0

    @property
    def size(self) -> int:
        return int(self.handle.end_of_file or 0)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            new = offset
        elif whence == io.SEEK_CUR:
            new = self.offset + offset
        elif whence == io.SEEK_END:
            new = self.size + offset
        else:
            raise ReadError(f"invalid whence {whence}")
        if new < 0:
            raise ReadError(f"negative seek position {new}")
        self.offset = new
        return new

    def read_all(self) -> bytes:
        """Reads from the cursor to end of file."""
        size = self.size
        chunks = []
        while self.offset < size:
            self.ctx.raise_if_done()
            length = min(size - self.offset, self.max_read_size)
            try:
                chunk = self.handle.read(self.offset, length)
            except Exception as e:
                if self.ctx.cancelled:
                    raise CheckCancelled(self.ctx.reason) from e
                raise ReadError(str(e)) from e
            if not chunk:
                break
            chunks.append(chunk)
            self.offset += len(chunk)
        return b"".join(chunks)

class ShareSession:
    def __init__(self, host: str, port: int = DEFAULT_SMB_PORT, ctx: Optional[CheckContext] = None,
                 require_signing: bool = False, connect_timeout: float = DEFAULT_CONNECT_TIMEOUT):
        self.host = host
        self.port = port
        self.ctx = ctx or CheckContext.background()
        self.require_signing = require_signing
        self.connect_timeout = connect_timeout

        self.connection: Optional[Connection] = None
        self.session: Optional[Session] = None
        self.tree: Optional[TreeConnect] = None
        self.file: Optional[RemoteFile] = None

        # (name, release fn), oldest first
        self._releasers: List[Tuple[str, Callable[[], None]]] = []
        self._lock = threading.Lock()
        self._aborted = False
        self._dialing = False
        self._transport_dropped = False
        self._unregister_cancel: Callable[[], None] = lambda: None

    def share_path(self, share: str) -> str:
        return f"\\\\{self.host}\\{share}"

    def _push(self, name: str, release: Callable[[], None]):
        with self._lock:
            if self._aborted:
                return
            self._releasers.append((name, release))

    def _step(self, error_cls, action: Callable[[], object], what: str):
        """Runs one blocking protocol step, translating failures to `error_cls`."""
        self.ctx.raise_if_done()
        logger.debug("%s (%s:%d)", what, self.host, self.port)
        try:
            return action()
        except ShareCheckError:
            raise
        except Exception as e:
            if self.ctx.cancelled:
                raise CheckCancelled(self.ctx.reason) from e
            raise error_cls(str(e) or type(e).__name__) from e

    def dial(self):
        connection = Connection(uuid.uuid4(), self.host, self.port, require_signing=self.require_signing)
        self.connection = connection
        # Registered before connecting: negotiation can fail with the socket already open
        self._push("connection", lambda: connection.disconnect(close=False))
        self._unregister_cancel = self.ctx.on_cancel(self._abort)

        timeout = self.ctx.remaining(self.connect_timeout)
        with self._lock:
            self._dialing = True
        try:
            self._step(DialError, lambda: connection.connect(timeout=max(timeout, 0.001)), "Dialing")
        finally:
            with self._lock:
                self._dialing = False
                aborted = self._aborted
            # A cancel that arrived mid-connect left the socket for us to close
            if aborted:
                self._drop_transport()
        self.ctx.raise_if_done()

    def authenticate(self, username: str, password: str, domain: str = ""):
        if self.connection is None:
            raise AuthenticationError("not connected")

        user = f"{domain}\\{username}" if domain else username
        session = Session(self.connection, username=user, password=password,
                          require_encryption=False, auth_protocol="ntlm")
        self.session = session
        self._step(AuthenticationError, session.connect, "Authenticating")
        self._push("session", session.disconnect)

    def mount(self, share: str) -> TreeConnect:
        if self.session is None:
            raise MountError("not authenticated")

        tree = TreeConnect(self.session, self.share_path(share))
        self.tree = tree
        self._step(MountError, tree.connect, f"Mounting {self.share_path(share)}")
        self._push("tree", tree.disconnect)
        return tree

    def open(self, path: str) -> RemoteFile:
        if self.tree is None:
            raise OpenError("no share mounted")

        handle = Open(self.tree, normalize_path(path))

        def create():
            handle.create(
                ImpersonationLevel.Impersonation,
                FilePipePrinterAccessMask.GENERIC_READ,
                FileAttributes.FILE_ATTRIBUTE_NORMAL,
                ShareAccess.FILE_SHARE_READ,
                CreateDisposition.FILE_OPEN,
                CreateOptions.FILE_NON_DIRECTORY_FILE,
            )

        self._step(OpenError, create, f"Opening {path}")
        self._push("file", handle.close)
        self.file = RemoteFile(handle, getattr(self.connection, "max_read_size", DEFAULT_READ_SIZE), self.ctx)
        return self.file

    def _abort(self):
        """Cancellation hook: drop the transport so any blocked call returns."""
        with self._lock:
            self._aborted = True
            pending = self._releasers
            self._releasers = []
            dialing = self._dialing
        if not pending:
            return
        # Closing the transport mid-connect would wait on smbprotocol's socket lock;
        # dial() drops it once connect returns
        transport = getattr(self.connection, "transport", None)
        if dialing and not getattr(transport, "connected", False):
            return
        logger.debug("Aborting connection to %s:%d (%d resource(s) dropped)", self.host, self.port, len(pending))
        self._drop_transport()

    def _drop_transport(self):
        with self._lock:
            if self._transport_dropped:
                return
            self._transport_dropped = True
        # smbprotocol only creates the transport inside connect()
        if self.connection is None or self.connection.transport is None:
            return
        try:
            self.connection.disconnect(close=False)
        except Exception as e:
            logger.warning("Failed to abort connection to %s: %s", self.host, e)

    def close(self):
        self._unregister_cancel()
        while True:
            with self._lock:
                if not self._releasers:
                    return
                name, release = self._releasers.pop()
            try:
                release()
            except Exception as e:
                logger.warning("Failed to release %s for %s: %s", name, self.host, e)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
