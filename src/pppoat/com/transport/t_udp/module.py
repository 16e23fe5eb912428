"""
UDP transport module

Carries the link byte stream over UDP datagrams between two fixed peers.

Example::

    module = UdpTransportModule()
    module.initialize(Config({"server": "true"}))
    try:
        await module.run(link_rd, link_wr, ctrl_fd)
    finally:
        module.shutdown()
"""
import logging
import socket
from dataclasses import dataclass
from typing import Optional

from pppoat.com.core.exceptions import ModuleStateError
from pppoat.com.core.types import NodeRole, WaitPrimitive
from pppoat.com.modules.module_registry import module_registry
from pppoat.com.modules.transport_module import AbstractTransportModule
from pppoat.com.transport.t_udp.communication import resolver
from pppoat.com.transport.t_udp.communication import socket as udp_socket
from pppoat.com.transport.t_udp.communication.forwarder import UdpForwarder
from pppoat.com.transport.t_udp.config import UdpConfig, UdpEndpoints
from pppoat.helper.conf import Config
from pppoat.helper.fd_util import wait_ready

logger = logging.getLogger(__name__)


@dataclass
class UdpContext:
    """Resources owned by an initialized UDP module."""
    role: NodeRole
    endpoints: UdpEndpoints
    remote: resolver.AddressList
    sock: socket.socket
    max_datagram: int
    check_sender: bool


@module_registry.register
class UdpTransportModule(AbstractTransportModule):
    """PPP over UDP."""

    name = "udp"
    description = "PPP over UDP"

    def __init__(self, wait: WaitPrimitive = wait_ready):
        super().__init__()
        self._wait = wait

    @property
    def context(self) -> Optional[UdpContext]:
        return self._context

    def initialize(self, conf: Config) -> UdpContext:
        """
        Resolve the peer and bind the local socket.

        Raises:
            ConfigurationError: On invalid options
            ResolutionFailedError: If the peer cannot be resolved
            SocketError: If the local socket cannot be created or bound
            ModuleStateError: If the module is already initialized
        """
        if self._context is not None:
            raise ModuleStateError(self.name, "already initialized")

        udp_conf = UdpConfig.from_conf(conf)
        endpoints = udp_conf.endpoints
        logger.info(
            "🔌 UDP %s: local port %d, peer %s:%d",
            udp_conf.role.value, endpoints.local_port, endpoints.remote_host, endpoints.remote_port
        )

        remote = resolver.resolve(endpoints.remote_host, endpoints.remote_port)
        try:
            sock = udp_socket.open_bound(endpoints.local_port, family=remote.first.family)
        except Exception:
            resolver.release(remote)
            raise

        self._context = UdpContext(
            role=udp_conf.role,
            endpoints=endpoints,
            remote=remote,
            sock=sock,
            max_datagram=udp_conf.max_datagram,
            check_sender=udp_conf.check_sender,
        )
        return self._context

    def shutdown(self) -> None:
        """Close the socket and release the resolved peer address."""
        ctx = self._context
        if ctx is None:
            logger.warning("⚠️ UDP module shut down without being initialized")
            return
        self._context = None

        try:
            udp_socket.close(ctx.sock)
        except OSError as e:
            logger.error("❌ Closing UDP socket failed: %s", e)
        resolver.release(ctx.remote)
        logger.info("🔌 UDP module shut down")

    async def run(self, link_rd: int, link_wr: int, ctrl: Optional[int] = None) -> None:
        """
        Forward the link over UDP.

        Returns when *ctrl* becomes readable, otherwise raises the terminal
        error (``BrokenLinkError`` when the link closes, ``FatalIOError`` on
        I/O failures).
        """
        ctx = self._context
        if ctx is None:
            raise ModuleStateError(self.name, "run() called before initialize()")

        forwarder = UdpForwarder(
            ctx.sock,
            ctx.remote.first,
            max_datagram=ctx.max_datagram,
            check_sender=ctx.check_sender,
            wait=self._wait,
        )
        try:
            await forwarder.run(link_rd, link_wr, ctrl)
        except Exception as e:
            logger.error("❌ UDP forwarding stopped: %s", e)
            raise
