"""
Core Communication Types

Shared enums and type aliases used by the transport modules.
"""
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple


class NodeRole(str, Enum):
    """
    Role of a node in the two-node tunnel.

    The role selects which fixed endpoint pair a transport instance uses.
    The ``server`` configuration option selects the initiator.
    """
    INITIATOR = "initiator"
    RESPONDER = "responder"


# Readiness-wait primitive:
#   await wait(read_fds, write_fds, timeout) -> (ready_read, ready_write)
# An empty result means the timeout expired.
WaitPrimitive = Callable[
    [Sequence[int], Sequence[int], Optional[float]],
    Awaitable[Tuple[List[int], List[int]]]
]
