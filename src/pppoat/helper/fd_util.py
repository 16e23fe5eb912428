"""
Descriptor helpers

Non-blocking mode switching, the asyncio based readiness-wait primitive and
a write loop that pushes a whole buffer into a descriptor.
"""
import asyncio
import os
from typing import List, Optional, Sequence, Tuple

from pppoat.com.core.exceptions import FatalIOError, TransientIOError, wrap_os_error
from pppoat.com.core.types import WaitPrimitive


def fd_nonblock_set(fd: int, enable: bool = True) -> None:
    """
    Switch *fd* to non-blocking (or back to blocking) mode.

    :raises FatalIOError: If the descriptor flags cannot be changed.
    """
    try:
        os.set_blocking(fd, not enable)
    except OSError as e:
        raise FatalIOError("fcntl", e) from e


async def wait_ready(
    read_fds: Sequence[int] = (),
    write_fds: Sequence[int] = (),
    timeout: Optional[float] = None,
) -> Tuple[List[int], List[int]]:
    """
    Suspend until at least one descriptor is ready.

    Readiness is reported by the running event loop's selector, so every
    descriptor found ready by the same poll is returned together.

    :param read_fds: Descriptors to watch for readability.
    :param write_fds: Descriptors to watch for writability.
    :param timeout: Seconds to wait. ``None`` waits forever.
    :return: ``(ready_read, ready_write)``; both empty when *timeout* expired.
    :raises OSError: If a descriptor cannot be registered with the loop.
    """
    loop = asyncio.get_running_loop()
    waiter: asyncio.Future = loop.create_future()
    ready_read: List[int] = []
    ready_write: List[int] = []

    def _on_ready(ready: List[int], fd: int) -> None:
        if fd not in ready:
            ready.append(fd)
        if not waiter.done():
            waiter.set_result(None)

    readers: List[int] = []
    writers: List[int] = []
    try:
        for fd in read_fds:
            loop.add_reader(fd, _on_ready, ready_read, fd)
            readers.append(fd)
        for fd in write_fds:
            loop.add_writer(fd, _on_ready, ready_write, fd)
            writers.append(fd)
        try:
            await asyncio.wait_for(waiter, timeout)
        except asyncio.TimeoutError:
            return [], []
    finally:
        for fd in readers:
            loop.remove_reader(fd)
        for fd in writers:
            loop.remove_writer(fd)

    return ready_read, ready_write


async def write_all(fd: int, data, wait: WaitPrimitive = wait_ready) -> None:
    """
    Write the whole of *data* to *fd*.

    Blocks (cooperatively) on a full descriptor until everything is written.

    :raises FatalIOError: On any non-transient write error.
    """
    view = memoryview(data)
    while view:
        try:
            written = os.write(fd, view)
        except OSError as e:
            error = wrap_os_error(e, "write")
            if not isinstance(error, TransientIOError):
                raise error from e
            if not error.interrupted:
                try:
                    await wait((), (fd,), None)
                except OSError as wait_error:
                    raise FatalIOError("wait", wait_error) from wait_error
            continue
        view = view[written:]
