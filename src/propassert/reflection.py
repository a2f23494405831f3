"""Property metadata records and the reflection that builds them from classes."""

from __future__ import annotations

import functools
import typing
from dataclasses import dataclass
from typing import Any, Annotated, Callable, get_args, get_origin

_MARKERS_ATTR = "__propassert_markers__"
_NO_ANNOTATION = object()


@dataclass(frozen=True, slots=True)
class PropertyInfo:
    """Description of a single property of a class.

    Attributes:
        name: Attribute name the property is bound to.
        declared_type: The getter's return annotation (a type, a typing alias,
            or the raw string when the forward reference cannot be resolved).
        is_virtual: Whether subclasses may override the accessor. Accessors
            decorated with ``typing.final`` are not virtual.
        markers: Marker objects applied to the property, in declaration order.
        declaring_type: The class that defines the property, if known.
    """

    name: str
    declared_type: Any = _NO_ANNOTATION
    is_virtual: bool = True
    markers: tuple[Any, ...] = ()
    declaring_type: type | None = None

    @property
    def type_name(self) -> str:
        return describe_type(self.declared_type)

    @property
    def description(self) -> str:
        return f"{self.type_name} {self.name}"


def describe_type(tp: Any) -> str:
    """Short human-readable name for a declared type."""
    if tp is _NO_ANNOTATION:
        return "object"
    if tp is None or tp is type(None):
        return "None"
    if isinstance(tp, str):
        return tp
    if get_origin(tp) is Annotated:
        return describe_type(get_args(tp)[0])
    if isinstance(tp, type) and not get_args(tp):
        return tp.__name__
    return repr(tp).replace("typing.", "")


def marked(*markers: Any) -> Callable[[Callable], Callable]:
    """Attach marker objects to a property accessor.

    Apply it below ``@property``::

        @property
        @marked(Required())
        def name(self) -> str: ...
    """

    def decorator(func: Callable) -> Callable:
        existing = getattr(func, _MARKERS_ATTR, ())
        setattr(func, _MARKERS_ATTR, tuple(existing) + markers)
        return func

    return decorator


def is_final(obj: Any) -> bool:
    return bool(getattr(obj, "__final__", False))


def _return_annotation(accessor: Callable) -> Any:
    try:
        hints = typing.get_type_hints(accessor, include_extras=True)
    except Exception:
        # Unresolvable forward reference: keep the raw annotation
        raw = getattr(accessor, "__annotations__", {})
        return raw.get("return", _NO_ANNOTATION)
    return hints.get("return", _NO_ANNOTATION)


def get_markers(accessor: Callable) -> tuple[Any, ...]:
    """Markers from ``marked(...)`` followed by ``Annotated`` metadata."""
    markers = tuple(getattr(accessor, _MARKERS_ATTR, ()))
    annotation = _return_annotation(accessor)
    if get_origin(annotation) is Annotated:
        markers += tuple(annotation.__metadata__)
    return markers


def _setter_value_type(setter: Callable) -> Any:
    annotations = getattr(setter, "__annotations__", {})
    params = [name for name in annotations if name != "return"]
    if not params:
        return _NO_ANNOTATION
    try:
        hints = typing.get_type_hints(setter, include_extras=True)
    except Exception:
        return annotations[params[-1]]
    return hints.get(params[-1], _NO_ANNOTATION)


def describe_property(name: str, attr: Any, owner: type | None = None) -> PropertyInfo:
    """Build a :class:`PropertyInfo` from a ``property``/``cached_property``.

    ``typing.final`` must sit below ``@property``: a plain ``property`` object
    cannot carry ``__final__``, so ``@final`` above it is silently lost and
    the property is reported as virtual. ``cached_property`` accepts it on
    either side.
    """
    sealed = False
    if isinstance(attr, functools.cached_property):
        accessor = attr.func
        declared = _return_annotation(accessor)
        sealed = is_final(attr)
    elif attr.fget is not None:
        accessor = attr.fget
        declared = _return_annotation(accessor)
    elif attr.fset is not None:
        # write-only
        accessor = attr.fset
        declared = _setter_value_type(accessor)
    else:
        return PropertyInfo(name=name, is_virtual=False, declaring_type=owner)

    if get_origin(declared) is Annotated:
        declared = get_args(declared)[0]

    return PropertyInfo(
        name=name,
        declared_type=declared,
        is_virtual=not (sealed or is_final(accessor)),
        markers=get_markers(accessor),
        declaring_type=owner,
    )


def get_properties(cls: type) -> list[PropertyInfo]:
    """Return every property visible on *cls*, most derived definitions first.

    A name bound lower in the MRO (property or not) hides base-class
    properties of the same name.
    """
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {type(cls).__name__}")

    seen: set[str] = set()
    result: list[PropertyInfo] = []
    for klass in cls.__mro__:
        for name, attr in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if isinstance(attr, (property, functools.cached_property)):
                result.append(describe_property(name, attr, owner=klass))
    return result


def is_decorated_with(prop: PropertyInfo, kind: type) -> bool:
    """Exact-kind marker check; instances of subclasses of *kind* don't count."""
    return any(type(marker) is kind for marker in prop.markers)
