from .resource import DEFAULT_PORT, VisaResource, parse_resource
from .device import Device
from .errors import (
    LxiError,
    ResourceError,
    MalformedResourceError,
    UnsupportedInterfaceError,
    UnsupportedResourceClassError,
    InvalidPortError,
    LxiConnectionError,
    LxiTimeoutError,
)

__all__ = [
    "DEFAULT_PORT",
    "VisaResource",
    "parse_resource",
    "Device",
    "LxiError",
    "ResourceError",
    "MalformedResourceError",
    "UnsupportedInterfaceError",
    "UnsupportedResourceClassError",
    "InvalidPortError",
    "LxiConnectionError",
    "LxiTimeoutError",
]
