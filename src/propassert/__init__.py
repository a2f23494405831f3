"""Fluent assertions about the structure of class properties."""

from propassert.assertions import AndConstraint, AssertionResult, PropertyInfoAssertions
from propassert.execution import AssertionFailedError, AssertionScope, verify
from propassert.reflection import PropertyInfo, get_properties, marked
from propassert.selectors import PropertySelector, properties

__all__ = [
    "AndConstraint",
    "AssertionFailedError",
    "AssertionResult",
    "AssertionScope",
    "PropertyInfo",
    "PropertyInfoAssertions",
    "PropertySelector",
    "get_properties",
    "marked",
    "properties",
    "verify",
]
