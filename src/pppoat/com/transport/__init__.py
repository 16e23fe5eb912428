"""
Transport implementations.

Importing this package registers the built-in modules with
:data:`pppoat.com.modules.module_registry`.
"""
from pppoat.com.transport.t_udp import UdpTransportModule

__all__ = ["UdpTransportModule"]
