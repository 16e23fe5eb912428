"""
UDP endpoint configuration

Per-role endpoint selection. Without explicit options both nodes bind
port ``0xc001`` and address each other on a private two-node network.
"""
from dataclasses import dataclass

from pppoat.com.core.exceptions import ConfigurationError
from pppoat.com.core.types import NodeRole
from pppoat.com.transport.t_udp.communication.forwarder import DEFAULT_MAX_DATAGRAM
from pppoat.helper.conf import Config

UDP_PORT_INITIATOR = 0xc001
UDP_PORT_RESPONDER = 0xc001
UDP_HOST_INITIATOR = "192.168.4.1"
UDP_HOST_RESPONDER = "192.168.4.10"

# Largest payload of a single IPv4 UDP datagram
UDP_MAX_PAYLOAD = 65507


@dataclass(frozen=True)
class UdpEndpoints:
    local_port: int
    remote_host: str
    remote_port: int


DEFAULT_ENDPOINTS = {
    NodeRole.INITIATOR: UdpEndpoints(UDP_PORT_INITIATOR, UDP_HOST_RESPONDER, UDP_PORT_RESPONDER),
    NodeRole.RESPONDER: UdpEndpoints(UDP_PORT_RESPONDER, UDP_HOST_INITIATOR, UDP_PORT_INITIATOR),
}


@dataclass(frozen=True)
class UdpConfig:
    """Everything the UDP module reads from the configuration."""
    role: NodeRole
    endpoints: UdpEndpoints
    max_datagram: int = DEFAULT_MAX_DATAGRAM
    check_sender: bool = True

    @classmethod
    def from_conf(cls, conf: Config) -> "UdpConfig":
        """
        Select role and endpoints.

        ``server`` truthy selects the initiator, anything else (absent,
        falsy or unrecognized) the responder. ``udp_local_port``,
        ``udp_remote_host`` and ``udp_remote_port`` override the role's
        defaults.

        :raises ConfigurationError: On malformed or out of range values.
        """
        role = NodeRole.INITIATOR if conf.is_true("server", strict=False) else NodeRole.RESPONDER
        defaults = DEFAULT_ENDPOINTS[role]

        endpoints = UdpEndpoints(
            local_port=_port(conf, "udp_local_port", defaults.local_port),
            remote_host=str(conf.get("udp_remote_host", defaults.remote_host)),
            remote_port=_port(conf, "udp_remote_port", defaults.remote_port),
        )
        if not endpoints.remote_host:
            raise ConfigurationError("udp_remote_host", "must not be empty")

        max_datagram = conf.get_int("udp_max_datagram", DEFAULT_MAX_DATAGRAM)
        if not 0 < max_datagram <= UDP_MAX_PAYLOAD:
            raise ConfigurationError("udp_max_datagram", f"{max_datagram} is not in 1..{UDP_MAX_PAYLOAD}")

        return cls(
            role=role,
            endpoints=endpoints,
            max_datagram=max_datagram,
            check_sender=conf.is_true("udp_check_sender", default=True),
        )


def _port(conf: Config, key: str, default: int) -> int:
    port = conf.get_int(key, default)
    if not 0 <= port <= 0xffff:
        raise ConfigurationError(key, f"{port} is not a valid port")
    if port == 0 and key == "udp_remote_port":
        raise ConfigurationError(key, "remote port must not be 0")
    return port
