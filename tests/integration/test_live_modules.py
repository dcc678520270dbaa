"""
Integration tests running the utility against the live sys.modules.

These tests use real imported modules (json, collections) as dependent
classes, so they exercise enumeration over every loaded module.

Run with: pytest --full
"""

import json  # noqa: F401
import sys
import types

import pytest

from ccu import ConditionalCompilationUtility, register_optional_dependency
from ccu.config import BuildSettings, BuildTargetGroup, InMemorySymbolStore
from ccu.host import Attribute, CompilationEvents, CompilerMessage, MessageSeverity, conditional, declare


@pytest.mark.integration
class TestLiveModules:
    """Full passes over sys.modules."""

    @pytest.fixture
    def store(self):
        return InMemorySymbolStore({BuildTargetGroup.STANDALONE: "FOO"})

    @pytest.fixture
    def utility(self, store):
        register_optional_dependency("json.decoder.JSONDecoder", "USE_JSON")
        register_optional_dependency("collections:OrderedDict", "USE_ORDERED_DICT")
        register_optional_dependency("ccu_integration_absent.Thing", "USE_ABSENT")
        return ConditionalCompilationUtility(
            store, settings=BuildSettings(BuildTargetGroup.STANDALONE)
        )

    def test_two_pass_enable(self, utility, store):
        first = utility.update()
        assert first.bootstrapped
        assert store.get_symbols(BuildTargetGroup.STANDALONE) == "FOO;UNITY_CCU"

        second = utility.update()
        assert second.symbols == "FOO;UNITY_CCU;USE_JSON;USE_ORDERED_DICT"
        assert utility.defines == ("UNITY_CCU", "USE_JSON", "USE_ORDERED_DICT")
        assert utility.enabled

        third = utility.update()
        assert not third.written

    def test_event_driven_cycle(self, utility, store):
        events = CompilationEvents()
        utility.install(events)

        events.reload_complete.emit()
        events.reload_complete.emit()
        assert "USE_JSON" in store.get_symbols(BuildTargetGroup.STANDALONE)

        events.compilation_finished.emit(
            "out", [CompilerMessage(MessageSeverity.ERROR, "CS0246", "missing type")]
        )
        assert store.get_symbols(BuildTargetGroup.STANDALONE) == "FOO;UNITY_CCU"
        assert utility.defines == ("UNITY_CCU",)


DECLARING_MODULE = "ccu_live_declaring"


@pytest.fixture
def declaring_module(monkeypatch):
    """Loaded module declaring marker attributes, next to a malformed entry."""

    @conditional("UNITY_CCU")
    class OptionalDependencyAttribute(Attribute):
        dependentClass: str = ""
        define: str = ""

        def __init__(self, dependent_class, define):
            self.dependentClass = dependent_class
            self.define = define

    class SlotsOnly:
        __slots__ = ()

    module = types.ModuleType(DECLARING_MODULE)
    OptionalDependencyAttribute.__module__ = DECLARING_MODULE
    module.OptionalDependencyAttribute = OptionalDependencyAttribute
    monkeypatch.setitem(sys.modules, DECLARING_MODULE, module)
    monkeypatch.setitem(sys.modules, "ccu_live_slots_only", SlotsOnly())

    declare(
        DECLARING_MODULE,
        OptionalDependencyAttribute("json.decoder.JSONDecoder", "USE_JSON"),
        OptionalDependencyAttribute("ccu_integration_absent.Thing", "USE_ABSENT"),
    )
    return module


@pytest.mark.integration
def test_declared_markers_over_live_modules(declaring_module):
    store = InMemorySymbolStore({BuildTargetGroup.STANDALONE: "FOO"})
    utility = ConditionalCompilationUtility(
        store, settings=BuildSettings(BuildTargetGroup.STANDALONE)
    )

    assert utility.update().bootstrapped
    result = utility.update()

    assert result.dependencies == {
        "json.decoder.JSONDecoder": "USE_JSON",
        "ccu_integration_absent.Thing": "USE_ABSENT",
    }
    assert result.resolved == ("json.decoder.JSONDecoder",)
    assert store.get_symbols(BuildTargetGroup.STANDALONE) == "FOO;UNITY_CCU;USE_JSON"
    assert utility.defines == ("UNITY_CCU", "USE_JSON")
