"""
Communication Layer Exceptions

Exception hierarchy for the transport modules.
Every error carries a negative errno-style ``code`` so the origin of a failure
stays traceable when it is reported by the surrounding application.
"""
import errno
from typing import Optional, Any, Dict, Union


# Conditions meaning "try again later"
TRANSIENT_ERRNOS = frozenset({errno.EAGAIN, errno.EWOULDBLOCK, errno.EINTR})


# ==============================================================================
# Base Exceptions
# ==============================================================================

class CommunicationError(Exception):
    """
    Base exception for all pppoat errors.

    Attributes:
        message: Error description
        details: Optional additional error context
        original_exception: Original exception if wrapped
        code: Negative errno-style error code
    """
    default_code: int = -errno.EIO

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_exception = original_exception
        self.code = code if code is not None else self.default_code

    def __str__(self) -> str:
        result = f"{self.message} (rc={self.code})"
        if self.details:
            result += f" | Details: {self.details}"
        if self.original_exception:
            result += f" | Caused by: {type(self.original_exception).__name__}: {self.original_exception}"
        return result


class ConfigurationError(CommunicationError):
    """Raised when a configuration option has an invalid value."""
    default_code = -errno.EINVAL

    def __init__(self, option: str, issue: str):
        super().__init__(
            f"Invalid value for option '{option}': {issue}",
            details={"option": option, "issue": issue}
        )
        self.option = option


# ==============================================================================
# Transport Layer Exceptions
# ==============================================================================

class TransportError(CommunicationError):
    """Base exception for transport layer errors."""
    pass


class ResolutionFailedError(TransportError):
    """Raised when name resolution of an endpoint fails."""
    default_code = -errno.ENOPROTOOPT

    def __init__(
        self,
        host: Optional[str],
        port: int,
        reason: Optional[str] = None,
        lookup_code: Optional[int] = None,
        original_exception: Optional[Exception] = None
    ):
        endpoint = f"{host if host is not None else '*'}:{port}"
        super().__init__(
            f"Failed to resolve '{endpoint}'" + (f": {reason}" if reason else ""),
            details={"host": host, "port": port, "lookup_code": lookup_code},
            original_exception=original_exception
        )
        self.host = host
        self.port = port
        self.lookup_code = lookup_code


class AddressListReleasedError(TransportError):
    """Raised when a released address list is used."""
    default_code = -errno.EBADF

    def __init__(self):
        super().__init__("Address list has already been released")


class SocketError(TransportError):
    """Raised when the UDP socket cannot be created or bound."""

    def __init__(
        self,
        port: int,
        reason: Optional[str] = None,
        original_exception: Optional[OSError] = None
    ):
        code = None
        if isinstance(original_exception, OSError) and original_exception.errno:
            code = -original_exception.errno
        super().__init__(
            f"Failed to open UDP socket on port {port}" + (f": {reason}" if reason else ""),
            details={"port": port},
            original_exception=original_exception,
            code=code
        )
        self.port = port


class BrokenLinkError(TransportError):
    """Raised when the local link descriptor has been closed (broken pipe)."""
    default_code = -errno.EPIPE

    def __init__(self, fd: int):
        super().__init__(
            f"Link descriptor {fd} closed",
            details={"fd": fd}
        )
        self.fd = fd


class FatalIOError(TransportError):
    """Raised when an I/O operation fails with a non-recoverable error."""

    def __init__(self, operation: str, original_exception: OSError):
        code = -original_exception.errno if original_exception.errno else None
        super().__init__(
            f"I/O operation '{operation}' failed",
            details={"operation": operation},
            original_exception=original_exception,
            code=code
        )
        self.operation = operation


# ==============================================================================
# Retry and Recovery Exceptions
# ==============================================================================

class RetryableError(CommunicationError):
    """
    Exception indicating the operation can be retried.

    Used for transient errors where retry might succeed.
    """
    pass


class TransientIOError(RetryableError):
    """
    Would-block or interrupted I/O.

    Absorbed by the forwarding loop, which waits for readiness and retries.
    """
    default_code = -errno.EAGAIN

    def __init__(self, operation: str, original_exception: OSError):
        super().__init__(
            f"I/O operation '{operation}' would block",
            details={"operation": operation},
            original_exception=original_exception,
            code=-original_exception.errno if original_exception.errno else None
        )
        self.operation = operation

    @property
    def interrupted(self) -> bool:
        """``True`` when the call was interrupted by a signal."""
        return self.code == -errno.EINTR


def is_transient(exc: OSError) -> bool:
    """Check whether *exc* is a would-block or interrupted condition."""
    if isinstance(exc, (BlockingIOError, InterruptedError)):
        return True
    return exc.errno in TRANSIENT_ERRNOS


def wrap_os_error(exc: OSError, operation: str) -> Union[TransientIOError, FatalIOError]:
    """
    Classify an ``OSError`` raised by a low-level I/O call.

    Args:
        exc: The error raised by ``os.read``, ``socket.sendto`` and friends
        operation: Name of the failing operation, kept for diagnostics

    Returns:
        TransientIOError for EAGAIN/EWOULDBLOCK/EINTR, FatalIOError otherwise
    """
    if is_transient(exc):
        return TransientIOError(operation, exc)
    return FatalIOError(operation, exc)


# ==============================================================================
# Module Layer Exceptions
# ==============================================================================

class ModuleError(CommunicationError):
    """Base exception for transport module management."""
    pass


class ModuleNotFoundInRegistryError(ModuleError):
    """Raised when requested transport module is not registered."""
    default_code = -errno.ENOENT

    def __init__(self, module_name: str):
        super().__init__(
            f"Transport module '{module_name}' not found",
            details={"module": module_name}
        )
        self.module_name = module_name


class ModuleRegistrationError(ModuleError):
    """Raised when module registration fails."""
    default_code = -errno.EEXIST

    def __init__(self, module_name: str, reason: str):
        super().__init__(
            f"Failed to register transport module '{module_name}': {reason}",
            details={"module": module_name, "reason": reason}
        )


class ModuleStateError(ModuleError):
    """Raised when a module operation is called in the wrong lifecycle state."""
    default_code = -errno.EINVAL

    def __init__(self, module_name: str, reason: str):
        super().__init__(
            f"Transport module '{module_name}': {reason}",
            details={"module": module_name}
        )
