"""Public/private method markers for service classes.

Markers are recorded in an explicit side table, :data:`visibility_registry`,
keyed by class. The table is written while classes are being defined and
only read afterwards, so it needs no locking.

Resolution for :func:`is_public` (highest precedence first):

1. the method is marked private on the class or a base class -> not public
2. the class (or a base class) is marked entirely public -> public
3. the method is marked public -> public
4. otherwise -> not public

Constructors are never public.

Usage
-----
.. code-block:: python

   @public
   class UserService:
       async def list_users(self): ...

       @private
       async def purge(self): ...

   is_public(UserService, "list_users")   # True
   is_public(UserService, "purge")        # False
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Type, TypeVar, Union

logger = logging.getLogger(__name__)

C = TypeVar("C")

CONSTRUCTORS = frozenset({"__init__", "__new__"})


@dataclass
class VisibilityRecord:
    """Flags recorded for one class."""

    class_public: bool = False
    # dicts keep marking order
    public: Dict[str, None] = field(default_factory=dict)
    private: Dict[str, None] = field(default_factory=dict)


class VisibilityRegistry:
    """Mapping from class to its :class:`VisibilityRecord`."""

    def __init__(self):
        self._records: Dict[type, VisibilityRecord] = {}

    def _record(self, cls: type) -> VisibilityRecord:
        return self._records.setdefault(cls, VisibilityRecord())

    def mark_class_public(self, cls: type) -> None:
        self._record(cls).class_public = True
        logger.debug(f"Marked class public: {cls.__qualname__}")

    def mark_public(self, cls: type, name: str) -> None:
        self._record(cls).public[name] = None

    def mark_private(self, cls: type, name: str) -> None:
        self._record(cls).private[name] = None

    def record_for(self, cls: type) -> VisibilityRecord:
        """Return the record for ``cls`` merged along its MRO.

        Base-class markings come first, so names keep definition order.

        :param cls: Class to resolve
        :return: New record; never the stored one
        """
        merged = VisibilityRecord()
        for klass in reversed(cls.__mro__):
            record = self._records.get(klass)
            if record is None:
                continue
            merged.class_public = merged.class_public or record.class_public
            merged.public.update(record.public)
            merged.private.update(record.private)
        return merged

    def forget(self, cls: type) -> None:
        self._records.pop(cls, None)

    def clear(self) -> None:
        """Remove all records. Useful for tests to ensure clean state."""
        self._records.clear()


visibility_registry = VisibilityRegistry()


class _MethodMarker:
    """Stand-in placed in a class body by :func:`public` / :func:`private`.

    When the class is created, ``__set_name__`` records the flag against the
    owning class and puts the original function back in place.
    """

    def __init__(self, func: Any, flag: str, registry: VisibilityRegistry):
        self.func = func
        self.flag = flag
        self.registry = registry

    def __set_name__(self, owner: type, name: str) -> None:
        # stacked markers (@public @private) each record their flag
        marker: Any = self
        while isinstance(marker, _MethodMarker):
            if marker.flag == "private":
                marker.registry.mark_private(owner, name)
            else:
                marker.registry.mark_public(owner, name)
            marker = marker.func
        setattr(owner, name, marker)

    def __call__(self, *args, **kwargs):
        return self.func(*args, **kwargs)


def public(
    target: Any = None, *, registry: VisibilityRegistry = visibility_registry
) -> Any:
    """Mark a class as entirely public, or a method as public.

    Works with and without parentheses: ``@public`` and ``@public()``.
    """

    def decorator(obj: Any) -> Any:
        if inspect.isclass(obj):
            registry.mark_class_public(obj)
            return obj
        return _MethodMarker(obj, "public", registry)

    if target is None:
        return decorator
    return decorator(target)


def private(
    target: Any = None, *, registry: VisibilityRegistry = visibility_registry
) -> Any:
    """Mark a method as private; overrides any public marking."""

    def decorator(obj: Callable) -> Any:
        if inspect.isclass(obj):
            raise TypeError("@private applies to methods, not classes")
        return _MethodMarker(obj, "private", registry)

    if target is None:
        return decorator
    return decorator(target)


def _definition_class(definition: Union[type, Any]) -> type:
    return definition if inspect.isclass(definition) else type(definition)


def _is_callable_member(cls: type, name: str) -> bool:
    value = inspect.getattr_static(cls, name)
    if isinstance(value, (staticmethod, classmethod)):
        return True
    return callable(value)


def is_public(
    definition: Union[Type[C], C],
    method_name: str,
    registry: VisibilityRegistry = visibility_registry,
) -> bool:
    """Return whether ``method_name`` may be called externally.

    :param definition: Class or instance
    :param method_name: Name of the method
    :return: True if the method is public
    """
    if method_name in CONSTRUCTORS:
        return False
    record = registry.record_for(_definition_class(definition))
    if method_name in record.private:
        return False
    if record.class_public:
        return True
    return method_name in record.public


def list_public_methods(
    definition: Union[Type[C], C],
    registry: VisibilityRegistry = visibility_registry,
) -> List[str]:
    """List the names of public methods.

    For a class marked entirely public this is every callable the class
    defines itself, in definition order, except constructors and dunder
    hooks. Otherwise it is the names explicitly marked public, in marking
    order, base classes first.

    Names marked private are left out in both cases, including for a class
    marked entirely public, so the listing always agrees with
    :func:`is_public`. A hosting framework therefore never sees a private
    method even on a fully public class.

    :param definition: Class or instance
    :return: Method names
    """
    cls = _definition_class(definition)
    record = registry.record_for(cls)
    if record.class_public:
        names = [
            name
            for name in vars(cls)
            if not (name.startswith("__") and name.endswith("__"))
            and _is_callable_member(cls, name)
        ]
    else:
        names = list(record.public)
    return [n for n in names if n not in record.private and n not in CONSTRUCTORS]
