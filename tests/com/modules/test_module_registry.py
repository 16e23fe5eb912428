"""
Tests for the transport module registry.
"""
import pytest

import pppoat.com.transport  # noqa: F401
from pppoat.com.core.exceptions import ModuleNotFoundInRegistryError, ModuleRegistrationError
from pppoat.com.modules.module_registry import ModuleRegistry, module_registry
from pppoat.com.modules.transport_module import AbstractTransportModule


class _LoopModule(AbstractTransportModule):
    name = "test-loop"
    description = "Loopback module for tests"

    def __init__(self, tag=None):
        super().__init__()
        self.tag = tag

    def initialize(self, conf):
        self._context = object()
        return self._context

    def shutdown(self):
        self._context = None

    async def run(self, link_rd, link_wr, ctrl=None):
        return None


class _OtherLoopModule(_LoopModule):
    pass


@pytest.fixture
def registry():
    saved = dict(module_registry._modules)
    yield module_registry
    module_registry._modules.clear()
    module_registry._modules.update(saved)


def test_singleton():
    assert ModuleRegistry() is ModuleRegistry()
    assert ModuleRegistry() is module_registry


def test_register_and_get(registry):
    assert registry.register(_LoopModule) is _LoopModule
    assert registry.get("test-loop") is _LoopModule


def test_register_same_class_twice(registry):
    registry.register(_LoopModule)
    registry.register(_LoopModule)
    assert registry.get("test-loop") is _LoopModule


def test_name_clash_is_rejected(registry):
    registry.register(_LoopModule)

    with pytest.raises(ModuleRegistrationError):
        registry.register(_OtherLoopModule)
    assert registry.get("test-loop") is _LoopModule


def test_force_replaces(registry):
    registry.register(_LoopModule)
    registry.register(_OtherLoopModule, force=True)
    assert registry.get("test-loop") is _OtherLoopModule


def test_nameless_module_is_rejected(registry):
    class Nameless(_LoopModule):
        name = ""

    with pytest.raises(ModuleRegistrationError):
        registry.register(Nameless)


def test_unknown_module(registry):
    with pytest.raises(ModuleNotFoundInRegistryError):
        registry.get("test-loop")


def test_create_passes_arguments(registry):
    registry.register(_LoopModule)

    module = registry.create("test-loop", tag="x")

    assert isinstance(module, _LoopModule)
    assert module.tag == "x"
    assert not module.is_initialized
    assert "idle" in repr(module)


def test_list_modules_sorted(registry):
    registry.register(_LoopModule)

    names = [cls.name for cls in registry.list_modules()]
    assert names == sorted(names)
    assert "test-loop" in names
    assert "udp" in names
