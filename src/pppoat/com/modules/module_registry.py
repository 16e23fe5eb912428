"""
Transport Module Registry

Central registry of the transport modules the application can run.
"""
import logging
from threading import RLock
from typing import Dict, List, Optional, Type

from pppoat.com.core.exceptions import (
    ModuleNotFoundInRegistryError,
    ModuleRegistrationError,
)
from pppoat.com.modules.transport_module import AbstractTransportModule

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """
    Central registry for transport module classes, keyed by module name.

    Thread-safe singleton pattern.
    """

    _instance: Optional['ModuleRegistry'] = None
    _lock = RLock()

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize registry (only once)."""
        if self._initialized:
            return

        self._modules: Dict[str, Type[AbstractTransportModule]] = {}
        self._initialized = True

    def register(
        self,
        module_cls: Type[AbstractTransportModule],
        force: bool = False,
    ) -> Type[AbstractTransportModule]:
        """
        Register a transport module class.

        Usable as a class decorator.

        Args:
            module_cls: Module class with a non-empty ``name``
            force: If True, replace an existing module of the same name
        """
        name = getattr(module_cls, "name", "")
        if not name:
            raise ModuleRegistrationError(repr(module_cls), "module has no name")

        with self._lock:
            if name in self._modules and self._modules[name] is not module_cls and not force:
                raise ModuleRegistrationError(
                    name,
                    "a module with this name is already registered. Use force=True to replace."
                )
            self._modules[name] = module_cls

        logger.debug("Transport module '%s' registered", name)
        return module_cls

    def get(self, name: str) -> Type[AbstractTransportModule]:
        """
        Look up a module class by name.

        Raises:
            ModuleNotFoundInRegistryError: If no module is registered as *name*
        """
        module_cls = self._modules.get(name)
        if module_cls is None:
            raise ModuleNotFoundInRegistryError(name)
        return module_cls

    def create(self, name: str, **kwargs) -> AbstractTransportModule:
        """Instantiate the module registered as *name*."""
        return self.get(name)(**kwargs)

    def list_modules(self) -> List[Type[AbstractTransportModule]]:
        """Registered module classes sorted by name."""
        return [self._modules[name] for name in sorted(self._modules)]


module_registry = ModuleRegistry()
