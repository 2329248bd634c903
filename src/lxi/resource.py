"""VISA resource string parsing for raw-socket LXI instruments.

Only the TCPIP socket form is understood::

    TCPIP[board]::<host>[::<port>][::SOCKET]

The port defaults to :data:`DEFAULT_PORT` when it is left out. IPv6
literals go in brackets, e.g. ``TCPIP::[fe80::1]::5025::SOCKET``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import (
    InvalidPortError,
    MalformedResourceError,
    UnsupportedInterfaceError,
    UnsupportedResourceClassError,
)

DEFAULT_PORT = 5025
"""SCPI raw socket port reserved for LXI instruments."""

# "::" outside of a bracketed IPv6 literal
_SEPARATOR_RE = re.compile(r"::(?![^\[]*\])")
_INTERFACE_RE = re.compile(r"^TCPIP(\d*)$", re.IGNORECASE)
_RESOURCE_CLASS = "SOCKET"


@dataclass(frozen=True)
class VisaResource:
    """Host and port of an instrument, parsed from a resource string."""

    host_address: str
    port: int = DEFAULT_PORT
    board_index: int = 0
    resource_class: str = _RESOURCE_CLASS
    resource_string: str = ""

    @property
    def address(self) -> tuple[str, int]:
        return (self.host_address, self.port)

    def __str__(self) -> str:
        return (
            f"TCPIP{self.board_index}::{self._host_token()}"
            f"::{self.port}::{self.resource_class}"
        )

    def _host_token(self) -> str:
        if ":" in self.host_address:
            return f"[{self.host_address}]"
        return self.host_address


def parse_resource(address: str) -> VisaResource:
    """Parse a VISA resource string into a :class:`VisaResource`.

    Raises:
        MalformedResourceError: wrong segment count or an empty segment.
        UnsupportedInterfaceError: the interface type is not TCPIP.
        UnsupportedResourceClassError: the suffix is not SOCKET.
        InvalidPortError: the port is not a number in 1..65535.
    """
    segments = _SEPARATOR_RE.split(address.strip())
    if not 2 <= len(segments) <= 4 or not all(segments):
        raise MalformedResourceError(
            f"Malformed resource string {address!r}: "
            f"expected TCPIP::<host>[::<port>][::SOCKET]"
        )

    interface, host, *rest = segments
    match = _INTERFACE_RE.match(interface)
    if match is None:
        raise UnsupportedInterfaceError(
            f"Unsupported interface type {interface!r} in {address!r}"
        )
    board_index = int(match.group(1) or 0)

    if host.startswith("[") or host.endswith("]"):
        if not (host.startswith("[") and host.endswith("]")) or len(host) < 3:
            raise MalformedResourceError(
                f"Malformed IPv6 host {host!r} in {address!r}"
            )
        host = host[1:-1]

    port_token = None
    suffix = None
    if len(rest) == 2:
        port_token, suffix = rest
    elif len(rest) == 1:
        if _is_number(rest[0]):
            port_token = rest[0]
        else:
            suffix = rest[0]

    if suffix is not None and suffix.upper() != _RESOURCE_CLASS:
        raise UnsupportedResourceClassError(
            f"Unsupported resource class {suffix!r} in {address!r}"
        )

    port = DEFAULT_PORT
    if port_token is not None:
        if not _is_number(port_token):
            raise InvalidPortError(f"Port {port_token!r} is not a number")
        port = int(port_token)
        if not 1 <= port <= 65535:
            raise InvalidPortError(f"Port {port} is out of range 1..65535")

    return VisaResource(
        host_address=host,
        port=port,
        board_index=board_index,
        resource_string=address,
    )


def _is_number(token: str) -> bool:
    return token.isascii() and token.isdigit()
