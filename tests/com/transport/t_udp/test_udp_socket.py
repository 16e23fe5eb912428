"""
Tests for UDP socket creation and binding.
"""
import errno
import socket
from unittest.mock import patch

import pytest

from pppoat.com.core.exceptions import SocketError
from pppoat.com.transport.t_udp.communication import resolver
from pppoat.com.transport.t_udp.communication import socket as udp_socket
from pppoat.com.transport.t_udp.communication.resolver import AddressList, SocketAddress


def _wildcard(*families):
    addresses = []
    for family in families:
        sockaddr = ("0.0.0.0", 0) if family == socket.AF_INET else ("::", 0, 0, 0)
        addresses.append(SocketAddress(family, socket.SOCK_DGRAM, socket.IPPROTO_UDP, sockaddr))
    return AddressList(None, 0, tuple(addresses))


@pytest.mark.integration
class TestOpenBound:

    def test_binds_ephemeral_port(self):
        sock = udp_socket.open_bound(0, family=socket.AF_INET)
        try:
            assert sock.family == socket.AF_INET
            assert sock.type == socket.SOCK_DGRAM
            assert sock.getsockname()[1] != 0
        finally:
            udp_socket.close(sock)
        assert sock.fileno() == -1

    def test_binds_requested_port(self, free_udp_port):
        sock = udp_socket.open_bound(free_udp_port, family=socket.AF_INET)
        try:
            assert sock.getsockname() == ("0.0.0.0", free_udp_port)
        finally:
            udp_socket.close(sock)

    def test_occupied_port_raises_socket_error(self):
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as holder:
            holder.bind(("0.0.0.0", 0))
            port = holder.getsockname()[1]

            with patch.object(resolver, "release", wraps=resolver.release) as release:
                with pytest.raises(SocketError) as exc_info:
                    udp_socket.open_bound(port, family=socket.AF_INET)

        assert exc_info.value.code == -errno.EADDRINUSE
        assert exc_info.value.port == port
        assert isinstance(exc_info.value.original_exception, OSError)
        release.assert_called_once()


class TestCandidateSelection:

    def test_family_filter_skips_other_families(self):
        addresses = _wildcard(socket.AF_INET6, socket.AF_INET)
        with patch.object(resolver, "resolve", return_value=addresses):
            sock = udp_socket.open_bound(0, family=socket.AF_INET)
        try:
            assert sock.family == socket.AF_INET
        finally:
            sock.close()
        assert addresses.released

    def test_no_candidate_of_family(self):
        addresses = _wildcard(socket.AF_INET)
        with patch.object(resolver, "resolve", return_value=addresses):
            with pytest.raises(SocketError, match="no wildcard address"):
                udp_socket.open_bound(0, family=socket.AF_INET6)
        assert addresses.released

    def test_falls_back_to_next_candidate(self):
        addresses = _wildcard(socket.AF_INET, socket.AF_INET)
        real_socket = socket.socket
        attempts = []

        def flaky_socket(*args):
            attempts.append(args)
            if len(attempts) == 1:
                raise OSError(errno.EAFNOSUPPORT, "Address family not supported by protocol")
            return real_socket(*args)

        with patch.object(resolver, "resolve", return_value=addresses), \
                patch.object(udp_socket.socket, "socket", side_effect=flaky_socket):
            sock = udp_socket.open_bound(0)
        try:
            assert len(attempts) == 2
            assert sock.family == socket.AF_INET
        finally:
            sock.close()

    def test_socket_creation_failure_reports_last_error(self):
        addresses = _wildcard(socket.AF_INET)
        error = OSError(errno.EMFILE, "Too many open files")
        with patch.object(resolver, "resolve", return_value=addresses), \
                patch.object(udp_socket.socket, "socket", side_effect=error):
            with pytest.raises(SocketError) as exc_info:
                udp_socket.open_bound(0)

        assert exc_info.value.code == -errno.EMFILE
        assert exc_info.value.original_exception is error
        assert addresses.released
