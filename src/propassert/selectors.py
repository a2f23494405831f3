"""Selection of the properties of a class that assertions run against."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator

from propassert.assertions.properties import PropertyInfoAssertions
from propassert.reflection import PropertyInfo, get_properties, is_decorated_with


class PropertySelector:
    """An immutable, filterable selection of properties of ``subject_type``.

    Every filter returns a new selector; the original is left untouched.
    """

    def __init__(
        self, subject_type: type, properties: Iterable[PropertyInfo] | None = None
    ):
        self.subject_type = subject_type
        if properties is None:
            properties = get_properties(subject_type)
        self._properties: tuple[PropertyInfo, ...] = tuple(properties)

    def __iter__(self) -> Iterator[PropertyInfo]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        names = ", ".join(p.name for p in self._properties)
        return f"PropertySelector({self.subject_type.__qualname__}: {names})"

    def _where(self, predicate: Callable[[PropertyInfo], bool]) -> PropertySelector:
        return PropertySelector(
            self.subject_type, [p for p in self._properties if predicate(p)]
        )

    def that_are_public(self) -> PropertySelector:
        return self._where(lambda p: not p.name.startswith("_"))

    def that_are_decorated_with(self, marker_type: type) -> PropertySelector:
        return self._where(lambda p: is_decorated_with(p, marker_type))

    def that_are_not_decorated_with(self, marker_type: type) -> PropertySelector:
        return self._where(lambda p: not is_decorated_with(p, marker_type))

    def of_type(self, declared_type: Any) -> PropertySelector:
        return self._where(lambda p: p.declared_type == declared_type)

    def that_are_virtual(self) -> PropertySelector:
        return self._where(lambda p: p.is_virtual)

    def that_are_not_virtual(self) -> PropertySelector:
        return self._where(lambda p: not p.is_virtual)

    def names(self) -> list[str]:
        return [p.name for p in self._properties]

    def should(self) -> PropertyInfoAssertions:
        return PropertyInfoAssertions(self.subject_type, self._properties)


def properties(subject_type: type) -> PropertySelector:
    """Select all properties of *subject_type*, including inherited ones."""
    return PropertySelector(subject_type)
