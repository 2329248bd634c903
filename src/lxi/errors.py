class LxiError(Exception):
    """Base exception for all LXI client errors."""


class ResourceError(LxiError):
    """Raised when a VISA resource string cannot be parsed."""


class MalformedResourceError(ResourceError):
    """Raised when a resource string has the wrong number of segments."""


class UnsupportedInterfaceError(ResourceError):
    """Raised when the interface type is anything other than TCPIP."""


class UnsupportedResourceClassError(ResourceError):
    """Raised when the trailing resource class is not SOCKET."""


class InvalidPortError(ResourceError):
    """Raised when the port segment is not a number in 1..65535."""


class LxiConnectionError(LxiError):
    """Raised when a connection cannot be established, used, or closed."""


class LxiTimeoutError(LxiConnectionError):
    """Raised when a read does not complete before its deadline."""
