from __future__ import annotations

import logging
import socket
import time

from .errors import LxiConnectionError, LxiTimeoutError
from .resource import VisaResource, parse_resource

logger = logging.getLogger(__name__)

_RECV_SIZE = 4096
ENCODING = "utf-8"


class Device:
    """LXI instrument reached over a raw TCP socket.

    Commands and queries are newline-terminated UTF-8 text. ``timeout`` is in
    milliseconds and is re-applied at the start of every read; zero or a
    negative value blocks until data arrives.

    A Device is not safe for concurrent use from several threads, except
    that :meth:`close` may be called to abort a read blocked elsewhere.
    """

    def __init__(
        self,
        sock: socket.socket,
        resource: VisaResource | None = None,
        timeout: int = 0,
    ):
        self._socket: socket.socket | None = sock
        self._resource = resource
        self._timeout = timeout
        self._buffer = bytearray()

    @classmethod
    def open(cls, address: str, timeout: int = 0) -> Device:
        """Parse a VISA resource string and connect to the instrument.

        Raises a :class:`~lxi.errors.ResourceError` before any network
        activity when ``address`` cannot be parsed.
        """
        resource = parse_resource(address)
        host, port = resource.address
        try:
            sock = socket.create_connection(resource.address)
        except OSError as e:
            raise LxiConnectionError(
                f"Cannot connect to {host}:{port}: {e}"
            ) from e
        logger.debug("Connected to %s:%d", host, port)
        return cls(sock, resource, timeout)

    @property
    def resource(self) -> VisaResource | None:
        return self._resource

    @property
    def timeout(self) -> int:
        return self._timeout

    @timeout.setter
    def timeout(self, value: int):
        self._timeout = value

    def is_open(self) -> bool:
        return self._socket is not None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = "open" if self.is_open() else "closed"
        return f"<Device {self._describe()} {state} timeout={self._timeout}ms>"

    # -- Raw I/O --

    def write(self, data: bytes) -> int:
        """Write all of ``data`` and return the number of bytes written."""
        sock = self._require_socket()
        try:
            # Writes never run against the read deadline.
            sock.settimeout(None)
            sock.sendall(data)
        except OSError as e:
            raise LxiConnectionError(f"Write failed: {e}") from e
        return len(data)

    def write_string(self, s: str) -> int:
        return self.write(s.encode(ENCODING))

    def read(self, buffer: bytearray | memoryview) -> int:
        """Read once into ``buffer`` and return the number of bytes stored.

        Data already buffered by :meth:`query` is handed out first. A
        return value of 0 means the instrument closed the connection.
        """
        sock = self._require_socket()
        try:
            self._arm_deadline(sock)
            if self._buffer:
                n = min(len(buffer), len(self._buffer))
                buffer[:n] = self._buffer[:n]
                del self._buffer[:n]
                return n
            n = sock.recv_into(buffer)
        except socket.timeout as e:
            raise LxiTimeoutError(
                f"Read timed out after {self._timeout} ms"
            ) from e
        except OSError as e:
            raise LxiConnectionError(f"Read failed: {e}") from e
        if n == 0 and self._socket is not sock:
            raise LxiConnectionError("Device was closed during read")
        return n

    # -- SCPI text --

    def command(self, fmt: str, *args) -> None:
        """Send a command line.

        ``fmt`` is %-formatted with ``args`` when any are given, then
        stripped and terminated with a single newline.
        """
        cmd = (fmt % args if args else fmt).strip()
        logger.debug("%s <- %r", self._describe(), cmd)
        self.write_string(cmd + "\n")

    def query(self, cmd: str = "") -> str:
        """Send ``cmd`` and return one response line, newline included.

        With an empty ``cmd`` nothing is sent and the next line the
        instrument produces is returned.
        """
        if cmd:
            self.command(cmd)
        sock = self._require_socket()
        deadline = None
        if self._timeout > 0:
            deadline = time.monotonic() + self._timeout / 1000
        while b"\n" not in self._buffer:
            if deadline is None:
                wait = None
            else:
                wait = deadline - time.monotonic()
                if wait <= 0:
                    raise LxiTimeoutError(
                        f"No response line within {self._timeout} ms"
                    )
            try:
                sock.settimeout(wait)
                chunk = sock.recv(_RECV_SIZE)
            except socket.timeout as e:
                raise LxiTimeoutError(
                    f"No response line within {self._timeout} ms"
                ) from e
            except OSError as e:
                raise LxiConnectionError(f"Read failed: {e}") from e
            if not chunk:
                raise LxiConnectionError("Connection closed by instrument")
            self._buffer.extend(chunk)
        end = self._buffer.index(b"\n") + 1
        line = self._buffer[:end].decode(ENCODING, errors="replace")
        del self._buffer[:end]
        logger.debug("%s -> %r", self._describe(), line)
        return line

    # -- Lifecycle --

    def close(self) -> None:
        """Close the connection. Calling it again does nothing."""
        sock = self._socket
        if sock is None:
            return
        self._socket = None
        self._buffer.clear()
        try:
            # Wakes up a read blocked on another thread.
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # peer already disconnected
        try:
            sock.close()
        except OSError as e:
            raise LxiConnectionError(f"Close failed: {e}") from e
        logger.debug("Closed %s", self._describe())

    def _require_socket(self) -> socket.socket:
        if self._socket is None:
            raise LxiConnectionError("Device is closed")
        return self._socket

    def _arm_deadline(self, sock: socket.socket) -> None:
        sock.settimeout(self._timeout / 1000 if self._timeout > 0 else None)

    def _describe(self) -> str:
        if self._resource is None:
            return "socket"
        host, port = self._resource.address
        return f"{host}:{port}"
