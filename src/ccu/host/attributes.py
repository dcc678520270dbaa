"""
Attribute base class and conditional marker.

Libraries declare optional dependencies without importing the utility itself.
They only need the host-level pieces defined here:

    @conditional("UNITY_CCU")
    class OptionalDependencyAttribute(Attribute):
        dependentClass: str = ""
        define: str = ""

        def __init__(self, dependent_class, define):
            self.dependentClass = dependent_class
            self.define = define

    declare(__name__, OptionalDependencyAttribute("numpy.ndarray", "USE_NUMPY"))

The declared instances live in the module-global ``__module_attributes__``
list, which is where the scanner looks for them.
"""

import inspect
import sys
from types import ModuleType
from typing import Any, Callable, List, Tuple, Type, TypeVar

MODULE_ATTRIBUTES = "__module_attributes__"
CONDITIONALS = "__conditionals__"

T = TypeVar("T", bound=type)

_MISSING = object()


class Attribute:
    """Base class for every declarative attribute type."""

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"


def conditional(condition: str) -> Callable[[T], T]:
    """Tag a class with a conditional marker.

    Conditions accumulate: stacking the decorator adds one entry per use.

    Args:
        condition: Symbol name the class is conditional on

    Returns:
        Class decorator

    Raises:
        ValueError: If condition is empty
    """
    if not condition:
        raise ValueError("Condition string must not be empty")

    def decorator(cls: T) -> T:
        own = cls.__dict__.get(CONDITIONALS, ())
        setattr(cls, CONDITIONALS, tuple(own) + (condition,))
        return cls

    return decorator


def conditions_of(cls: type) -> Tuple[str, ...]:
    """Return every conditional marker on a class, inherited ones included."""
    conditions: List[str] = []
    for klass in inspect.getmro(cls):
        conditions.extend(klass.__dict__.get(CONDITIONALS, ()))
    return tuple(conditions)


def is_concrete(cls: type) -> bool:
    """Check that a class is neither abstract nor a protocol (interface)."""
    if inspect.isabstract(cls):
        return False
    return not getattr(cls, "_is_protocol", False)


def has_field(cls: Type[Any], name: str) -> bool:
    """Check whether a class declares a string data field with the given name.

    An annotated name counts only when annotated as ``str``. An unannotated
    plain (non-callable) class attribute counts too; its value type is left
    to the reader of the field. Methods and properties do not count.
    """
    for klass in inspect.getmro(cls):
        annotations = inspect.get_annotations(klass)
        if name in annotations:
            return annotations[name] in (str, "str")
        value = klass.__dict__.get(name, _MISSING)
        if value is _MISSING:
            continue
        if callable(value) or isinstance(value, (property, classmethod, staticmethod)):
            return False
        return True
    return False


def module_attributes(module: ModuleType) -> List[Any]:
    """Return the module-level attribute instances declared by a module.

    Raises:
        TypeError: If the module has no namespace or its attribute list is
            not iterable
    """
    namespace = getattr(module, "__dict__", None)
    if not isinstance(namespace, dict):
        raise TypeError(f"{type(module).__name__} object has no module namespace")
    attrs = namespace.get(MODULE_ATTRIBUTES)
    if not attrs:
        return []
    try:
        return list(attrs)
    except TypeError as e:
        raise TypeError(f"{MODULE_ATTRIBUTES} is not iterable: {e}") from e


def declare(module_name: str, *attributes: Attribute) -> None:
    """Append attribute instances to a module's module-level attributes.

    Args:
        module_name: Name of an already imported module (usually ``__name__``)
        *attributes: Attribute instances to attach

    Raises:
        KeyError: If the module is not in sys.modules
    """
    module = sys.modules[module_name]
    existing = module.__dict__.setdefault(MODULE_ATTRIBUTES, [])
    existing.extend(attributes)
