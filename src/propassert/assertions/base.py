"""Base data structures for the assertion system."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class AssertionResult:
    """Result of evaluating a single assertion outside of a test run.

    Attributes:
        name: Identifier for the assertion (e.g. "be_virtual:person-properties").
        passed: Whether the assertion held.
        message: Failure message, or a short confirmation when it passed.
    """

    name: str
    passed: bool
    message: str


class AndConstraint(Generic[T]):
    """Returned by every assertion so further assertions can be chained.

    ``and`` is a keyword, so the subject is exposed as ``and_``::

        selector.should().be_virtual().and_.be_decorated_with(Required)
    """

    def __init__(self, parent: T):
        self._parent = parent

    @property
    def and_(self) -> T:
        return self._parent
