"""
UDP transport: resolver, socket management and the forwarding loop.
"""
from pppoat.com.transport.t_udp.module import UdpTransportModule, UdpContext
from pppoat.com.transport.t_udp.config import UdpConfig, UdpEndpoints, DEFAULT_ENDPOINTS
from pppoat.com.transport.t_udp.communication.forwarder import UdpForwarder

__all__ = [
    "UdpTransportModule",
    "UdpContext",
    "UdpConfig",
    "UdpEndpoints",
    "DEFAULT_ENDPOINTS",
    "UdpForwarder",
]
