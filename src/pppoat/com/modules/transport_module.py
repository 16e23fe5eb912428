"""
Transport Module Interface

Abstract base class for all transport modules.
A module moves the link byte stream over one kind of transport.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

from pppoat.helper.conf import Config


class AbstractTransportModule(ABC):
    """
    Abstract base class for all transport modules.

    Lifecycle: :meth:`initialize` once, :meth:`run` until it returns or
    raises, :meth:`shutdown` exactly once after a successful initialize.
    """

    name: str = ""
    description: str = ""

    def __init__(self):
        self._context: Optional[Any] = None

    @property
    def is_initialized(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> Optional[Any]:
        """Transport context owned by this module, ``None`` when not initialized."""
        return self._context

    @abstractmethod
    def initialize(self, conf: Config) -> Any:
        """
        Acquire every resource the module needs.

        Args:
            conf: Application configuration

        Returns:
            The transport context

        Raises:
            CommunicationError: If initialization fails; nothing is leaked
        """
        pass

    @abstractmethod
    def shutdown(self) -> None:
        """Release the transport context. Never raises."""
        pass

    @abstractmethod
    async def run(self, link_rd: int, link_wr: int, ctrl: Optional[int] = None) -> None:
        """
        Forward the link until shutdown is requested through *ctrl*.

        Args:
            link_rd: Link read descriptor
            link_wr: Link write descriptor
            ctrl: Control descriptor, readable means shut down

        Raises:
            CommunicationError: The terminal error of the forwarding
        """
        pass

    def __repr__(self) -> str:
        state = "initialized" if self.is_initialized else "idle"
        return f"<{type(self).__name__} '{self.name}' {state}>"
