"""
UDP socket management

Creates the datagram socket for a local wildcard address and binds it.
"""
import logging
import socket
from typing import Optional

from pppoat.com.core.exceptions import SocketError
from pppoat.com.transport.t_udp.communication import resolver

logger = logging.getLogger(__name__)


def open_bound(port: int, family: int = socket.AF_UNSPEC) -> socket.socket:
    """
    Open a UDP socket bound to the wildcard address on *port*.

    Candidates come from :func:`resolver.resolve` with ``host=None``. The
    first one (restricted to *family* unless it is ``AF_UNSPEC``) whose socket
    can be created and bound is used. The resolved list is always released.

    :param port: Local UDP port, ``0`` lets the OS pick one.
    :param family: Address family the socket must have.
    :return: Open and bound socket, owned by the caller.
    :raises ResolutionFailedError: If the wildcard address cannot be resolved.
    :raises SocketError: If no candidate could be created and bound.
    """
    addresses = resolver.resolve(None, port)
    last_error: Optional[OSError] = None
    try:
        candidates = [a for a in addresses if family in (socket.AF_UNSPEC, a.family)]
        if not candidates:
            raise SocketError(port, f"no wildcard address of family {family}")

        for address in candidates:
            try:
                sock = socket.socket(address.family, address.socktype, address.proto)
            except OSError as e:
                last_error = e
                continue
            try:
                sock.bind(address.sockaddr)
            except OSError as e:
                last_error = e
                sock.close()
                continue

            logger.info("✅ UDP socket bound to %s", address.sockaddr[:2])
            return sock
    finally:
        resolver.release(addresses)

    raise SocketError(
        port,
        last_error.strerror if last_error is not None else None,
        original_exception=last_error
    )


def close(sock: socket.socket) -> None:
    """Close a socket previously returned by :func:`open_bound`."""
    fd = sock.fileno()
    sock.close()
    logger.debug("UDP socket fd=%d closed", fd)
