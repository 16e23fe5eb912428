"""
UDP endpoint resolution

Turns a ``(host, port)`` pair into concrete datagram socket addresses.
``host=None`` requests the wildcard address used for local binds.
The resulting :class:`AddressList` is owned by the caller and must be
handed back through :func:`release`.
"""
import logging
import socket
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple

from pppoat.com.core.exceptions import (
    AddressListReleasedError,
    ConfigurationError,
    ResolutionFailedError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SocketAddress:
    """One ``getaddrinfo`` candidate."""
    family: int
    socktype: int
    proto: int
    sockaddr: Tuple[Any, ...]

    @property
    def host(self) -> str:
        return self.sockaddr[0]

    @property
    def port(self) -> int:
        return self.sockaddr[1]


class AddressList:
    """
    Ordered, immutable result of a resolution.

    The list stays usable until :func:`release` is called on it.
    """

    def __init__(self, host: Optional[str], port: int, addresses: Tuple[SocketAddress, ...]):
        self.host = host
        self.port = port
        self._addresses = addresses
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def first(self) -> SocketAddress:
        """
        Preferred candidate.

        :raises AddressListReleasedError: If the list was released.
        """
        if self._released:
            raise AddressListReleasedError()
        return self._addresses[0]

    def __iter__(self) -> Iterator[SocketAddress]:
        return iter(self._addresses)

    def __len__(self) -> int:
        return len(self._addresses)

    def __repr__(self) -> str:
        return (f"AddressList(host={self.host!r}, port={self.port}, "
                f"addresses={[a.sockaddr for a in self._addresses]}, "
                f"released={self._released})")


def resolve(host: Optional[str], port: int) -> AddressList:
    """
    Resolve *host* and *port* into UDP socket addresses.

    Address families are not restricted; ``AI_ADDRCONFIG`` limits results
    to the families configured on this system where the platform supports it.

    :param host: Host name or literal address, ``None`` for a wildcard bind.
    :param port: UDP port number.
    :return: Candidates in the order returned by the system resolver.
    :raises ConfigurationError: If *port* is out of range.
    :raises ResolutionFailedError: If the lookup fails or finds nothing.
    """
    if not 0 <= port <= 0xffff:
        raise ConfigurationError("port", f"{port} is out of range")

    flags = socket.AI_PASSIVE if host is None else 0
    flags |= getattr(socket, "AI_ADDRCONFIG", 0)

    try:
        infos = socket.getaddrinfo(
            host, str(port), socket.AF_UNSPEC, socket.SOCK_DGRAM,
            socket.IPPROTO_UDP, flags
        )
    except socket.gaierror as e:
        logger.error("❌ getaddrinfo rc=%s: %s", e.errno, e.strerror)
        raise ResolutionFailedError(
            host, port, e.strerror, lookup_code=e.errno, original_exception=e
        ) from e

    addresses = tuple(
        SocketAddress(family, socktype, proto, sockaddr)
        for family, socktype, proto, _canonname, sockaddr in infos
    )
    if not addresses:
        raise ResolutionFailedError(host, port, "no addresses found")

    logger.debug("Resolved %s:%d -> %s", host or "*", port, [a.sockaddr for a in addresses])
    return AddressList(host, port, addresses)


def release(addresses: AddressList) -> None:
    """Release an address list obtained from :func:`resolve`."""
    if addresses._released:
        logger.warning("⚠️ Address list for %s:%d released twice", addresses.host or "*", addresses.port)
        return
    addresses._addresses = ()
    addresses._released = True
