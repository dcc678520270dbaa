"""
Shared fixtures for ccu unit tests.

Modules are built with types.ModuleType so nothing is imported and
sys.modules is left untouched.
"""

import types

import pytest

from ccu.config import BuildSettings, BuildTargetGroup, InMemorySymbolStore
from ccu.host import Attribute, ModuleEnumerator, conditional
from ccu.reconcile import DependencyRegistry, Reconciler


def _make_module(name, *classes, attributes=(), **members):
    module = types.ModuleType(name)
    for cls in classes:
        cls.__module__ = name
        setattr(module, cls.__name__, cls)
    for key, value in members.items():
        setattr(module, key, value)
    if attributes:
        module.__module_attributes__ = list(attributes)
    return module


def _make_marker_type(
    name="OptionalDependencyAttribute",
    condition="UNITY_CCU",
    fields=("dependentClass", "define"),
):
    def __init__(self, dependent_class="", define=""):
        self.dependentClass = dependent_class
        self.define = define

    namespace = {"__annotations__": {f: str for f in fields}, "__init__": __init__}
    for f in fields:
        namespace[f] = ""
    cls = type(name, (Attribute,), namespace)
    if condition:
        cls = conditional(condition)(cls)
    return cls


@pytest.fixture
def make_module():
    """Factory for synthetic modules."""
    return _make_module


@pytest.fixture
def make_marker_type():
    """Factory for marker attribute types."""
    return _make_marker_type


@pytest.fixture
def marker():
    """A valid marker type tagged with UNITY_CCU."""
    return _make_marker_type()


@pytest.fixture
def bar_module(make_module):
    """Module 'Foo' defining class Bar, so 'Foo.Bar' resolves."""

    class Bar:
        pass

    return make_module("Foo", Bar)


@pytest.fixture
def decl_module(make_module, marker):
    """Module declaring OptionalDependency('Foo.Bar', 'USE_BAR')."""
    return make_module("decl", marker, attributes=[marker("Foo.Bar", "USE_BAR")])


@pytest.fixture
def store():
    """Symbol store with UNITY_CCU already enabled for standalone."""
    return InMemorySymbolStore({BuildTargetGroup.STANDALONE: "UNITY_CCU"})


@pytest.fixture
def settings():
    return BuildSettings(selected_group=BuildTargetGroup.STANDALONE)


@pytest.fixture
def make_reconciler(store, settings):
    """Factory building a Reconciler over an explicit module list."""

    def factory(*modules, registry=None, target_store=None):
        return Reconciler(
            target_store if target_store is not None else store,
            settings=settings,
            enumerator=ModuleEnumerator(modules),
            registry=registry if registry is not None else DependencyRegistry(),
        )

    return factory
