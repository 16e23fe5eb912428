"""
UDP forwarding loop

Relays a local link byte stream over a UDP socket and back.

Every chunk read from the link is sent as exactly one datagram, so the
maximum read size equals the maximum datagram size. Both peers must use the
same ``max_datagram`` or longer datagrams are truncated on receive.
"""
import logging
import os
import socket
from typing import Optional

from pppoat.com.core.exceptions import (
    BrokenLinkError,
    FatalIOError,
    TransientIOError,
    wrap_os_error,
)
from pppoat.com.core.types import WaitPrimitive
from pppoat.com.transport.t_udp.communication.resolver import SocketAddress
from pppoat.helper.fd_util import fd_nonblock_set, wait_ready, write_all

logger = logging.getLogger(__name__)

DEFAULT_MAX_DATAGRAM = 4096


class UdpForwarder:
    """
    Bidirectional link <-> UDP relay for one transport context.

    The forwarder owns a single buffer sized to ``max_datagram`` which is
    reused for both directions.

    Example:
        >>> forwarder = UdpForwarder(sock, remote.first)
        >>> await forwarder.run(link_rd, link_wr, ctrl_fd)
    """

    def __init__(
        self,
        sock: socket.socket,
        remote: SocketAddress,
        *,
        max_datagram: int = DEFAULT_MAX_DATAGRAM,
        check_sender: bool = True,
        wait: WaitPrimitive = wait_ready,
    ):
        """
        Args:
            sock: Bound UDP socket
            remote: Resolved peer address datagrams are sent to
            max_datagram: Size of the relay buffer
            check_sender: Drop datagrams not sent by *remote*
            wait: Readiness-wait primitive
        """
        if max_datagram <= 0:
            raise ValueError(f"max_datagram must be positive, got {max_datagram}")
        self._sock = sock
        self._remote = remote
        self._check_sender = check_sender
        self._wait = wait
        self._buf = bytearray(max_datagram)
        self.dropped = 0

    @property
    def max_datagram(self) -> int:
        return len(self._buf)

    async def _wait_for(self, read_fds=(), write_fds=()):
        try:
            return await self._wait(read_fds, write_fds, None)
        except OSError as e:
            raise FatalIOError("wait", e) from e

    async def send_all(self, data) -> None:
        """
        Send the entire *data* to the remote address.

        Interrupted calls are retried at once, would-block waits for the
        socket to become writable. Partial sends advance through the buffer
        until nothing is left.

        :raises FatalIOError: On any other send error.
        """
        view = memoryview(data)
        sock_fd = self._sock.fileno()
        while view:
            try:
                sent = self._sock.sendto(view, self._remote.sockaddr)
            except OSError as e:
                error = wrap_os_error(e, "sendto")
                if not isinstance(error, TransientIOError):
                    raise error from e
                if not error.interrupted:
                    await self._wait_for(write_fds=(sock_fd,))
                continue
            view = view[sent:]

    async def run(self, link_rd: int, link_wr: int, ctrl: Optional[int] = None) -> None:
        """
        Forward data until the link breaks, an I/O error occurs or *ctrl*
        becomes readable.

        Args:
            link_rd: Link descriptor read from and sent to the peer
            link_wr: Link descriptor received datagrams are written to
            ctrl: Optional control descriptor, readable means shut down

        Raises:
            BrokenLinkError: The link read side returned end of file
            FatalIOError: Any non-recoverable I/O error
        """
        sock_fd = self._sock.fileno()
        fd_nonblock_set(link_rd, True)
        self._sock.setblocking(False)

        watched = [link_rd, sock_fd]
        if ctrl is not None:
            watched.append(ctrl)

        logger.info("🔄 Forwarding link fd=%d/%d <-> udp %s", link_rd, link_wr, self._remote.sockaddr[:2])
        while True:
            readable, _ = await self._wait_for(read_fds=watched)

            if ctrl is not None and ctrl in readable:
                logger.info("🛑 Shutdown requested on control fd=%d", ctrl)
                return
            if link_rd in readable:
                await self._forward_link(link_rd)
            if sock_fd in readable:
                await self._forward_socket(link_wr)

    async def _forward_link(self, link_rd: int) -> None:
        try:
            length = os.readv(link_rd, [self._buf])
        except OSError as e:
            error = wrap_os_error(e, "read")
            if isinstance(error, TransientIOError):
                return
            raise error from e

        if length == 0:
            raise BrokenLinkError(link_rd)
        await self.send_all(memoryview(self._buf)[:length])

    async def _forward_socket(self, link_wr: int) -> None:
        try:
            length, sender = self._sock.recvfrom_into(self._buf)
        except OSError as e:
            error = wrap_os_error(e, "recvfrom")
            if isinstance(error, TransientIOError):
                return
            raise error from e

        if self._check_sender and not self._is_remote(sender):
            self.dropped += 1
            logger.warning("⚠️ Dropped %d bytes from unexpected sender %s", length, sender)
            return
        if length > 0:
            await write_all(link_wr, memoryview(self._buf)[:length], self._wait)

    def _is_remote(self, sender) -> bool:
        return tuple(sender[:2]) == tuple(self._remote.sockaddr[:2])
