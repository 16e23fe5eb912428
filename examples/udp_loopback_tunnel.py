"""
Example: UDP tunnel between two nodes on loopback

Demonstrates UdpTransportModule:
- Initiator/responder selection with the ``server`` option
- Endpoint overrides for a single host
- Forwarding pipes as the link on both ends
- Graceful shutdown through the control descriptor
"""
import asyncio
import logging
import os
import socket

from pppoat.com.transport.t_udp import UdpTransportModule
from pppoat.helper.conf import Config
from pppoat.helper.fd_util import wait_ready

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


async def main():
    port_a, port_b = _free_port(), _free_port()

    initiator = UdpTransportModule()
    responder = UdpTransportModule()
    initiator.initialize(Config({
        "server": "true",
        "udp_local_port": port_a,
        "udp_remote_host": "127.0.0.1",
        "udp_remote_port": port_b,
    }))
    responder.initialize(Config({
        "udp_local_port": port_b,
        "udp_remote_host": "127.0.0.1",
        "udp_remote_port": port_a,
    }))

    # link_in -> module -> UDP -> peer module -> link_out
    a_in_r, a_in_w = os.pipe()
    a_out_r, a_out_w = os.pipe()
    b_in_r, b_in_w = os.pipe()
    b_out_r, b_out_w = os.pipe()
    ctrl_r, ctrl_w = os.pipe()
    fds = [a_in_r, a_in_w, a_out_r, a_out_w, b_in_r, b_in_w, b_out_r, b_out_w, ctrl_r, ctrl_w]

    try:
        tasks = [
            asyncio.ensure_future(initiator.run(a_in_r, a_out_w, ctrl_r)),
            asyncio.ensure_future(responder.run(b_in_r, b_out_w, ctrl_r)),
        ]

        for i in range(3):
            frame = f"frame #{i}".encode()
            os.write(a_in_w, frame)
            await wait_ready((b_out_r,), (), 3.0)
            logger.info("Responder link received: %s", os.read(b_out_r, 4096))

        os.write(b_in_w, b"reply")
        await wait_ready((a_out_r,), (), 3.0)
        logger.info("Initiator link received: %s", os.read(a_out_r, 4096))

        # one byte on the shared control pipe stops both loops
        os.write(ctrl_w, b"\0")
        await asyncio.gather(*tasks)
    finally:
        initiator.shutdown()
        responder.shutdown()
        for fd in fds:
            os.close(fd)


if __name__ == "__main__":
    asyncio.run(main())
