from pppoat.com.modules.transport_module import AbstractTransportModule
from pppoat.com.modules.module_registry import ModuleRegistry, module_registry

__all__ = ["AbstractTransportModule", "ModuleRegistry", "module_registry"]
