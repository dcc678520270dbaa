"""
Unit tests for marker type discovery and dependency harvesting.
"""

import abc
import logging

from ccu.host import Attribute, ModuleEnumerator, conditional
from ccu.reconcile.discovery import discover_marker_types, is_tagged
from ccu.reconcile.harvesting import harvest_dependencies
from ccu.reconcile.registry import DependencyRegistry


class TestDiscoverMarkerTypes:
    """Test marker type discovery."""

    def test_finds_tagged_type(self, make_module, marker):
        enumerator = ModuleEnumerator([make_module("decl", marker)])

        result = discover_marker_types(enumerator, "UNITY_CCU")

        assert result.marker_types == (marker,)
        assert result.rejected == ()

    def test_condition_is_case_insensitive(self, make_module, make_marker_type):
        lower = make_marker_type(condition="unity_ccu")
        enumerator = ModuleEnumerator([make_module("decl", lower)])

        assert discover_marker_types(enumerator, "UNITY_CCU").types == {lower}

    def test_ignores_other_conditions(self, make_module, make_marker_type):
        other = make_marker_type(condition="DEBUG")
        untagged = make_marker_type(name="Untagged", condition=None)
        enumerator = ModuleEnumerator([make_module("decl", other, untagged)])

        result = discover_marker_types(enumerator, "UNITY_CCU")

        assert result.marker_types == ()
        assert result.rejected == ()

    def test_ignores_non_attribute_types(self, make_module):
        @conditional("UNITY_CCU")
        class NotAnAttribute:
            dependentClass: str = ""
            define: str = ""

        enumerator = ModuleEnumerator([make_module("decl", NotAnAttribute)])
        assert discover_marker_types(enumerator, "UNITY_CCU").marker_types == ()

    def test_ignores_abstract_types(self, make_module):
        @conditional("UNITY_CCU")
        class AbstractMarker(Attribute, metaclass=abc.ABCMeta):
            dependentClass: str = ""
            define: str = ""

            @abc.abstractmethod
            def describe(self):
                pass

        enumerator = ModuleEnumerator([make_module("decl", AbstractMarker)])
        assert discover_marker_types(enumerator, "UNITY_CCU").marker_types == ()

    def test_rejects_missing_define(self, make_module, make_marker_type, caplog):
        broken = make_marker_type(name="BrokenAttribute", fields=("dependentClass",))
        enumerator = ModuleEnumerator([make_module("decl", broken)])

        with caplog.at_level(logging.ERROR):
            result = discover_marker_types(enumerator, "UNITY_CCU")

        assert result.marker_types == ()
        assert result.rejected == ((broken, "define"),)
        assert "[CCU] Attribute type BrokenAttribute missing field: define" in caplog.text

    def test_rejects_missing_dependent_class(self, make_module, make_marker_type, caplog):
        broken = make_marker_type(name="BrokenAttribute", fields=("define",))
        enumerator = ModuleEnumerator([make_module("decl", broken)])

        with caplog.at_level(logging.ERROR):
            result = discover_marker_types(enumerator, "UNITY_CCU")

        assert result.rejected == ((broken, "dependentClass"),)
        assert "missing field: dependentClass" in caplog.text

    def test_rejects_non_string_field(self, make_module):
        @conditional("UNITY_CCU")
        class CountAttribute(Attribute):
            dependentClass: str = ""
            define: int = 0

        enumerator = ModuleEnumerator([make_module("decl", CountAttribute)])

        result = discover_marker_types(enumerator, "UNITY_CCU")

        assert result.marker_types == ()
        assert result.rejected == ((CountAttribute, "define"),)

    def test_rejection_does_not_stop_discovery(self, make_module, make_marker_type, marker):
        broken = make_marker_type(name="BrokenAttribute", fields=())
        enumerator = ModuleEnumerator(
            [make_module("a", broken), make_module("b", marker)]
        )

        result = discover_marker_types(enumerator, "UNITY_CCU")

        assert result.marker_types == (marker,)
        assert len(result.rejected) == 1

    def test_is_tagged(self, make_marker_type):
        assert is_tagged(make_marker_type(condition="Unity_Ccu"), "UNITY_CCU")
        assert not is_tagged(make_marker_type(condition=None), "UNITY_CCU")


class TestHarvestDependencies:
    """Test dependency harvesting."""

    def test_collects_instances(self, make_module, marker):
        module = make_module(
            "decl",
            marker,
            attributes=[marker("Foo.Bar", "USE_BAR"), marker("Baz.Qux", "USE_QUX")],
        )

        dependencies = harvest_dependencies(ModuleEnumerator([module]), {marker})

        assert dependencies == {"Foo.Bar": "USE_BAR", "Baz.Qux": "USE_QUX"}
        assert list(dependencies) == ["Foo.Bar", "Baz.Qux"]

    def test_first_write_wins(self, make_module, marker):
        first = make_module("first", marker, attributes=[marker("Foo.Bar", "USE_BAR")])
        second = make_module("second", attributes=[marker("Foo.Bar", "OTHER")])

        dependencies = harvest_dependencies(ModuleEnumerator([first, second]), {marker})

        assert dependencies == {"Foo.Bar": "USE_BAR"}

    def test_skips_empty_and_non_string_values(self, make_module, marker):
        bad_types = marker()
        bad_types.dependentClass = 42
        bad_types.define = "X"
        module = make_module(
            "decl",
            marker,
            attributes=[marker("", "USE_EMPTY"), marker("Foo.Bar", ""), bad_types],
        )

        assert harvest_dependencies(ModuleEnumerator([module]), {marker}) == {}

    def test_ignores_instances_of_unlisted_types(self, make_module, marker, make_marker_type):
        other = make_marker_type(name="OtherAttribute", condition="DEBUG")
        module = make_module("decl", marker, other, attributes=[other("Foo.Bar", "USE_BAR")])

        assert harvest_dependencies(ModuleEnumerator([module]), {marker}) == {}

    def test_subclass_instances_need_their_own_discovery(self, make_module, marker):
        # Membership is by exact type, as discovery lists every concrete subclass itself
        class Derived(marker):
            pass

        module = make_module("decl", marker, Derived, attributes=[Derived("Foo.Bar", "USE_BAR")])

        assert harvest_dependencies(ModuleEnumerator([module]), {marker}) == {}
        assert harvest_dependencies(ModuleEnumerator([module]), {marker, Derived}) == {
            "Foo.Bar": "USE_BAR"
        }

    def test_malformed_type_contributes_nothing(self, make_module, make_marker_type, marker):
        broken = make_marker_type(name="BrokenAttribute", fields=("dependentClass",))
        module = make_module(
            "decl",
            broken,
            marker,
            attributes=[broken("Foo.Bar", "USE_BROKEN"), marker("Baz.Qux", "USE_QUX")],
        )
        enumerator = ModuleEnumerator([module])

        discovery = discover_marker_types(enumerator, "UNITY_CCU")
        dependencies = harvest_dependencies(enumerator, discovery.types)

        assert dependencies == {"Baz.Qux": "USE_QUX"}

    def test_registry_merged_after_scan(self, make_module, marker):
        module = make_module("decl", marker, attributes=[marker("Foo.Bar", "USE_BAR")])
        registry = DependencyRegistry()
        registry.register("Foo.Bar", "REGISTERED_BAR")
        registry.register("Baz.Qux", "USE_QUX")

        dependencies = harvest_dependencies(ModuleEnumerator([module]), {marker}, registry)

        assert dependencies == {"Foo.Bar": "USE_BAR", "Baz.Qux": "USE_QUX"}

    def test_registry_without_marker_types(self):
        registry = DependencyRegistry()
        registry.register("Foo.Bar", "USE_BAR")

        assert harvest_dependencies(ModuleEnumerator([]), set(), registry) == {"Foo.Bar": "USE_BAR"}
