from pppoat.com.core.exceptions import (
    CommunicationError,
    ConfigurationError,
    TransportError,
    ResolutionFailedError,
    AddressListReleasedError,
    SocketError,
    BrokenLinkError,
    FatalIOError,
    RetryableError,
    TransientIOError,
    ModuleError,
    ModuleNotFoundInRegistryError,
    ModuleRegistrationError,
    ModuleStateError,
    is_transient,
    wrap_os_error,
)
from pppoat.com.core.types import NodeRole, WaitPrimitive

__all__ = [
    "CommunicationError",
    "ConfigurationError",
    "TransportError",
    "ResolutionFailedError",
    "AddressListReleasedError",
    "SocketError",
    "BrokenLinkError",
    "FatalIOError",
    "RetryableError",
    "TransientIOError",
    "ModuleError",
    "ModuleNotFoundInRegistryError",
    "ModuleRegistrationError",
    "ModuleStateError",
    "is_transient",
    "wrap_os_error",
    "NodeRole",
    "WaitPrimitive",
]
